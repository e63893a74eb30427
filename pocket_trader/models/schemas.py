"""Pydantic schemas"""
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field


T = TypeVar("T")


# User schemas
class UserBase(BaseModel):
    """Base user schema"""
    email: EmailStr


class UserCreate(UserBase):
    """User creation schema"""
    password: str = Field(..., min_length=8)


class UserLogin(BaseModel):
    """User login schema"""
    email: EmailStr
    password: str


class UserResponse(UserBase):
    """User response schema"""
    id: UUID
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# Token schemas
class Token(BaseModel):
    """Token schema"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Token payload schema"""
    user_id: Optional[UUID] = None
    email: Optional[str] = None


# Telegram schemas
class TelegramMessage(BaseModel):
    """Subset of a Telegram Bot API message"""
    message_id: int
    text: Optional[str] = None
    date: Optional[int] = None

    model_config = {"extra": "allow"}


class TelegramUpdate(BaseModel):
    """Telegram Bot API update"""
    update_id: Optional[int] = None
    message: Optional[TelegramMessage] = None
    channel_post: Optional[TelegramMessage] = None
    edited_channel_post: Optional[TelegramMessage] = None

    model_config = {"extra": "allow"}

    @property
    def effective_message(self) -> Optional[TelegramMessage]:
        """First message-like payload carried by the update"""
        return self.message or self.channel_post or self.edited_channel_post


# Signal schemas
class SignalResponse(BaseModel):
    """Signal response schema"""
    id: UUID
    asset: str
    timeframe: str
    direction: str
    amount: Decimal
    raw_message: Optional[str] = None
    telegram_message_id: Optional[int] = None
    entry_time: Optional[time] = None
    status: str
    result: Optional[str] = None
    received_at: datetime

    model_config = {"from_attributes": True}


class SignalStatusUpdate(BaseModel):
    """Execution status reported by the relay"""
    status: Literal["executed", "failed"]


# Auto-trade schemas
class AutoTradeMessage(BaseModel):
    """Message exchanged between popup, relay and broker tab"""
    action: Literal[
        "toggleAutoTrade", "getStatus", "captureVisibleTab",
        "signalExecuted", "signalFailed",
    ]
    enabled: Optional[bool] = None
    signal_id: Optional[UUID] = Field(default=None, alias="signalId")
    trade_id: Optional[str] = Field(default=None, alias="tradeId")

    model_config = ConfigDict(populate_by_name=True)


# Push schemas
class PushSubscriptionKeys(BaseModel):
    """Browser push subscription keys"""
    p256dh: str
    auth: str


class PushSubscriptionCreate(BaseModel):
    """PushSubscription.toJSON() as sent by the browser"""
    endpoint: str
    keys: PushSubscriptionKeys


class PushUnsubscribe(BaseModel):
    """Push unsubscribe request"""
    endpoint: str


class VapidKeyResponse(BaseModel):
    """VAPID public key"""
    public_key: str = Field(serialization_alias="publicKey")


class PushSendResult(BaseModel):
    """Push delivery summary"""
    message: str
    sent: int
    failed: int


# Price alert schemas
class PriceAlertCreate(BaseModel):
    """Price alert creation schema"""
    symbol: str
    symbol_name_ar: str = ""
    symbol_name_en: str = ""
    category: str = "crypto"
    target_price: Decimal = Field(..., gt=0)
    condition: Literal["above", "below"]


class PriceAlertToggle(BaseModel):
    """Price alert toggle schema"""
    is_active: bool


class PriceAlertResponse(PriceAlertCreate):
    """Price alert response schema"""
    id: UUID
    user_id: UUID
    is_active: bool
    triggered_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AlertCheckResult(BaseModel):
    """Price alert watcher run summary"""
    success: bool = True
    checked: int
    triggered: int
    push_sent: int


# Favorite schemas
class FavoriteCreate(BaseModel):
    """Favorite creation schema"""
    symbol: str
    symbol_name_ar: str = ""
    symbol_name_en: str = ""
    category: str = ""


class FavoriteResponse(FavoriteCreate):
    """Favorite response schema"""
    id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


# Journal schemas
class JournalEntryCreate(BaseModel):
    """Journal entry creation schema"""
    trade_date: date = Field(default_factory=date.today)
    symbol: Optional[str] = None
    direction: Optional[Literal["buy", "sell", "call", "put"]] = None
    entry_price: Optional[Decimal] = None
    exit_price: Optional[Decimal] = None
    profit_loss: Optional[Decimal] = None
    result: Optional[Literal["win", "loss", "pending", "breakeven"]] = None
    notes: Optional[str] = None
    daily_goal: Optional[Decimal] = None
    daily_achieved: Optional[Decimal] = None
    lessons_learned: Optional[str] = None


class JournalEntryUpdate(BaseModel):
    """Journal entry update schema"""
    trade_date: Optional[date] = None
    symbol: Optional[str] = None
    direction: Optional[Literal["buy", "sell", "call", "put"]] = None
    entry_price: Optional[Decimal] = None
    exit_price: Optional[Decimal] = None
    profit_loss: Optional[Decimal] = None
    result: Optional[Literal["win", "loss", "pending", "breakeven"]] = None
    notes: Optional[str] = None
    daily_goal: Optional[Decimal] = None
    daily_achieved: Optional[Decimal] = None
    lessons_learned: Optional[str] = None


class JournalEntryResponse(JournalEntryCreate):
    """Journal entry response schema"""
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class JournalStats(BaseModel):
    """Journal win/loss statistics"""
    wins: int
    losses: int
    total: int
    win_rate: int
    total_profit: Decimal


# Trading goal schemas
class TradingGoalCreate(BaseModel):
    """Trading goal creation schema"""
    initial_capital: Decimal = Field(..., gt=0)
    target_amount: Decimal = Field(..., gt=0)
    duration_days: int = Field(..., gt=0)
    market_type: Literal["forex", "crypto", "stocks", "metals"]
    loss_compensation_rate: Decimal = Field(default=Decimal("0"), ge=0)


class TradingGoalUpdate(BaseModel):
    """Trading goal update schema"""
    initial_capital: Optional[Decimal] = None
    target_amount: Optional[Decimal] = None
    duration_days: Optional[int] = None
    market_type: Optional[Literal["forex", "crypto", "stocks", "metals"]] = None
    loss_compensation_rate: Optional[Decimal] = None
    is_active: Optional[bool] = None


class TradingGoalResponse(TradingGoalCreate):
    """Trading goal response schema"""
    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# Paper trading schemas
class WalletResponse(BaseModel):
    """Virtual wallet response schema"""
    id: UUID
    balance: Decimal
    initial_balance: Decimal
    total_profit_loss: Decimal
    total_trades: int
    winning_trades: int
    losing_trades: int

    model_config = {"from_attributes": True}


class WalletBalanceUpdate(BaseModel):
    """Manual wallet balance change"""
    balance: Decimal = Field(..., gt=0)


class TradeOpenRequest(BaseModel):
    """Paper trade open request"""
    symbol: str
    symbol_name_ar: str = ""
    direction: Literal["buy", "sell"]
    order_type: Literal["market", "limit", "stop"] = "market"
    amount: Decimal = Field(..., gt=0)
    entry_price: Decimal = Field(..., gt=0)
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None


class TradeCloseRequest(BaseModel):
    """Paper trade close request"""
    exit_price: Decimal = Field(..., gt=0)


class PriceCheckRequest(BaseModel):
    """Current prices used to evaluate stop loss / take profit"""
    prices: Dict[str, Decimal]


class TradeResponse(BaseModel):
    """Paper trade response schema"""
    id: UUID
    symbol: str
    symbol_name_ar: Optional[str] = None
    direction: str
    order_type: str
    amount: Decimal
    quantity: Decimal
    entry_price: Decimal
    exit_price: Optional[Decimal] = None
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None
    status: str
    profit_loss: Optional[Decimal] = None
    opened_at: datetime
    closed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class WalletStateResponse(BaseModel):
    """Wallet together with its trades"""
    message: Optional[str] = None
    wallet: WalletResponse
    trades: List[TradeResponse]


# Notification schemas
class NotificationResponse(BaseModel):
    """In-app notification response schema"""
    id: UUID
    type: str
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# Shared
class MutationResponse(BaseModel, Generic[T]):
    """Result of a write followed by a re-fetch of the list"""
    message: str
    items: List[T]


# Health Check
class HealthCheck(BaseModel):
    """Health check schema"""
    status: str
    timestamp: datetime
    version: str = "1.0.0"
