from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponseSchema(BaseModel):
    message: str
    error_kind: str
    field: str | None = None
    conflicting_slots: list[int] | None = None
    retryable: bool | None = None
    debug: str | None = None


class NotificationSchema(BaseModel):
    sent: bool
    reason: str | None = None


class CreatedEventSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    booking_id: str = Field(alias="bookingId")
    html_link: str | None = Field(default=None, alias="htmlLink")
    summary: str | None = None
    services: list[str]
    observations: str | None = None
    studio_address: str = Field(alias="studioAddress")
    telegram_notification: str = Field(alias="telegramNotification")
    notification: NotificationSchema


class CreateEventResponseSchema(BaseModel):
    message: str
    event: CreatedEventSchema


class UserDataSchema(BaseModel):
    name: str
    email: str
    phone: str
    observations: str | None = None


class BookingSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: datetime.date
    slots: list[int]
    services: list[str]
    user_data: UserDataSchema = Field(alias="userData")
    status: str
    created_at: datetime.datetime = Field(alias="createdAt")
    event_id: str | None = Field(default=None, alias="eventId")
    studio_address: str | None = Field(default=None, alias="studioAddress")


class StudioSchema(BaseModel):
    name: str
    address: str
    email: str
    phone: str


class ScheduleSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    available_hours: list[int] = Field(alias="availableHours")
    working_days: list[int] = Field(alias="workingDays")


class TelegramStatusSchema(BaseModel):
    enabled: bool


class AdminConfigSchema(BaseModel):
    studio: StudioSchema
    services: dict[str, str]
    schedule: ScheduleSchema
    telegram: TelegramStatusSchema
    timezone: str


class TelegramTestResponseSchema(BaseModel):
    message: str
    sent: bool
    reason: str | None = None
