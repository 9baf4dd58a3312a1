"""Pydantic schemas for admin feature flags."""

from pydantic import BaseModel


class SettingsRead(BaseModel):
    rep_can_post_jobs: bool
    faculty_can_post_jobs: bool


class SettingUpdate(BaseModel):
    setting_key: str
    setting_value: bool


class SettingToggleResult(BaseModel):
    setting_key: str
    setting_value: bool
    previous_value: bool
    error: str | None = None
