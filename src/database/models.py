"""
SQLAlchemy ORM Models for the CTA stores.

Tables:
- dismissed_ctas: dismissal ledger, one row per CTA id, never deleted
- surveys: survey offers and their lifecycle status
- user_stage: single row holding the onboarding stage
- app_settings: small key/value store (hide tips, privacy switch,
  onboarding dialog journey, install timestamp)
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

from domain.models import AppStage, SurveyStatus


Base = declarative_base()


class DismissedCtaRecord(Base):
    """Ledger row for a shown/dismissed CTA."""
    __tablename__ = "dismissed_ctas"

    cta_id = Column(String(64), primary_key=True)
    dismissed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<DismissedCtaRecord {self.cta_id}>"


class SurveyRecord(Base):
    """Survey offer."""
    __tablename__ = "surveys"

    survey_id = Column(String(64), primary_key=True)
    url = Column(Text, nullable=True)
    day_of_installation = Column(Integer, nullable=True)
    status = Column(String(32), nullable=False, default=SurveyStatus.NOT_ALLOCATED.value, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SurveyRecord {self.survey_id} {self.status}>"


class UserStageRecord(Base):
    """Onboarding stage. A single row keyed by USER_STAGE_KEY."""
    __tablename__ = "user_stage"

    key = Column(String(32), primary_key=True)
    app_stage = Column(String(32), nullable=False, default=AppStage.NEW.value)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


USER_STAGE_KEY = "user"


class AppSettingRecord(Base):
    """Key/value application setting."""
    __tablename__ = "app_settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
