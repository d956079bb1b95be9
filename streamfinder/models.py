from sqlalchemy import JSON, Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from .db import Base


class Club(Base):
    __tablename__ = "clubs"

    club_id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False, default="")
    country = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    primary_color = Column(String, nullable=True)
    secondary_color = Column(String, nullable=True)
    popularity_score = Column(Integer, nullable=True)

    # competition slug -> participates (True/False)
    competitions = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class League(Base):
    __tablename__ = "leagues"

    league_id = Column(Integer, primary_key=True, index=True)
    league_slug = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False, default="")
    country_code = Column(String, nullable=True)
    number_of_games = Column(Integer, nullable=False, default=0)
    popularity = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class StreamingProvider(Base):
    __tablename__ = "streaming"

    streamer_id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, nullable=True, index=True)
    provider_name = Column(String, nullable=False, default="")
    logo_url = Column(String, nullable=True)
    monthly_price = Column(String, nullable=False, default="")   # "29,99 €"
    yearly_price = Column(String, nullable=False, default="")
    affiliate_url = Column(String, nullable=True)

    # competition slug -> number of games aired
    coverage = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class AppSettings(Base):
    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True)
    max_combination_size = Column(Integer, nullable=False, default=3)
    exhaustive_combination_size = Column(Integer, nullable=False, default=2)
    top_providers_limit = Column(Integer, nullable=False, default=8)
    max_combinations = Column(Integer, nullable=False, default=5000)
    default_target_coverages = Column(String, nullable=False, default="100,90,66")
    savings_rate = Column(Float, nullable=False, default=0.1)
    max_results = Column(Integer, nullable=False, default=50)
    updated_at_utc = Column(DateTime(timezone=True), server_default=func.now())
