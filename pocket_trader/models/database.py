"""SQLAlchemy database models"""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import (
    BigInteger, Boolean, Column, Date, DateTime, ForeignKey, Integer,
    JSON, Numeric, String, Text, Time, UniqueConstraint, Uuid
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    """Users table"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    wallet = relationship("VirtualWallet", back_populates="user", uselist=False, cascade="all, delete-orphan")
    push_subscriptions = relationship("PushSubscription", back_populates="user", cascade="all, delete-orphan")
    price_alerts = relationship("PriceAlert", back_populates="user", cascade="all, delete-orphan")


class Signal(Base):
    """Telegram channel signals"""
    __tablename__ = "signals"

    id = Column(Uuid, primary_key=True, default=uuid4)
    asset = Column(String(30), nullable=False)
    timeframe = Column(String(10), nullable=False)
    direction = Column(String(10), nullable=False)  # CALL, PUT
    amount = Column(Numeric(20, 2), nullable=False, default=1)
    raw_message = Column(Text)
    telegram_message_id = Column(BigInteger, unique=True, index=True)
    entry_time = Column(Time)  # broker-local time of day
    status = Column(String(20), nullable=False, default="pending")  # pending/executed/failed
    result = Column(String(10))  # win/win1/win2/loss
    received_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class VirtualWallet(Base):
    """Paper trading wallet"""
    __tablename__ = "virtual_wallets"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    balance = Column(Numeric(20, 8), nullable=False, default=1000)
    initial_balance = Column(Numeric(20, 8), nullable=False, default=1000)
    total_profit_loss = Column(Numeric(20, 8), nullable=False, default=0)
    total_trades = Column(Integer, nullable=False, default=0)
    winning_trades = Column(Integer, nullable=False, default=0)
    losing_trades = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="wallet")
    trades = relationship("VirtualTrade", back_populates="wallet", cascade="all, delete-orphan")


class VirtualTrade(Base):
    """Paper trades"""
    __tablename__ = "virtual_trades"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_id = Column(Uuid, ForeignKey("virtual_wallets.id", ondelete="CASCADE"), nullable=False)
    symbol = Column(String(30), nullable=False)
    symbol_name_ar = Column(String(100))
    direction = Column(String(10), nullable=False)  # buy, sell
    order_type = Column(String(10), nullable=False, default="market")  # market, limit, stop
    amount = Column(Numeric(20, 8), nullable=False)
    quantity = Column(Numeric(20, 8), nullable=False)
    entry_price = Column(Numeric(20, 8), nullable=False)
    exit_price = Column(Numeric(20, 8))
    stop_loss = Column(Numeric(20, 8))
    take_profit = Column(Numeric(20, 8))
    status = Column(String(20), nullable=False, default="open")  # open/pending/closed/cancelled
    profit_loss = Column(Numeric(20, 8))
    opened_at = Column(DateTime, default=datetime.utcnow)
    closed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    wallet = relationship("VirtualWallet", back_populates="trades")


class PushSubscription(Base):
    """Web Push subscriptions"""
    __tablename__ = "push_subscriptions"
    __table_args__ = (UniqueConstraint("user_id", "endpoint", name="uq_push_subscriptions_user_endpoint"),)

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    endpoint = Column(Text, nullable=False)
    p256dh = Column(Text, nullable=False)
    auth = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="push_subscriptions")


class PriceAlert(Base):
    """Price alerts"""
    __tablename__ = "price_alerts"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    symbol = Column(String(30), nullable=False)
    symbol_name_ar = Column(String(100), nullable=False, default="")
    symbol_name_en = Column(String(100), nullable=False, default="")
    category = Column(String(30), nullable=False, default="crypto")
    target_price = Column(Numeric(20, 8), nullable=False)
    condition = Column(String(10), nullable=False)  # above, below
    is_active = Column(Boolean, nullable=False, default=True)
    triggered_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="price_alerts")


class UserFavorite(Base):
    """Favorite markets"""
    __tablename__ = "user_favorites"
    __table_args__ = (UniqueConstraint("user_id", "symbol", name="uq_user_favorites_user_symbol"),)

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    symbol = Column(String(30), nullable=False)
    symbol_name_ar = Column(String(100), nullable=False, default="")
    symbol_name_en = Column(String(100), nullable=False, default="")
    category = Column(String(30), nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)


class JournalEntry(Base):
    """Daily trading journal"""
    __tablename__ = "user_daily_journal"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trade_date = Column(Date, nullable=False)
    symbol = Column(String(30))
    direction = Column(String(10))  # buy/sell/call/put
    entry_price = Column(Numeric(20, 8))
    exit_price = Column(Numeric(20, 8))
    profit_loss = Column(Numeric(20, 8))
    result = Column(String(20))  # win/loss/pending/breakeven
    notes = Column(Text)
    daily_goal = Column(Numeric(20, 2))
    daily_achieved = Column(Numeric(20, 2))
    lessons_learned = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TradingGoal(Base):
    """Capital growth goals"""
    __tablename__ = "trading_goals"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    initial_capital = Column(Numeric(20, 2), nullable=False)
    target_amount = Column(Numeric(20, 2), nullable=False)
    duration_days = Column(Integer, nullable=False)
    market_type = Column(String(20), nullable=False)  # forex/crypto/stocks/metals
    loss_compensation_rate = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserNotification(Base):
    """In-app notifications"""
    __tablename__ = "user_notifications"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False, default="general")
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    data = Column(JSON)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
