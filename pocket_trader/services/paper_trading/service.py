"""Virtual wallet and paper trades"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.core.exceptions import (
    InsufficientBalanceException, NotFoundException, ValidationException
)
from pocket_trader.models.database import VirtualTrade, VirtualWallet
from pocket_trader.models.schemas import TradeOpenRequest
from pocket_trader.services.realtime import ChangeFeed, change_feed


def calculate_profit_loss(
    direction: str,
    entry_price: Decimal,
    exit_price: Decimal,
    quantity: Decimal,
) -> Decimal:
    """
    P&L of a paper trade
    
    Args:
        direction: buy or sell
        entry_price: entry price
        exit_price: exit price
        quantity: position size in units
        
    Returns:
        Profit (positive) or loss (negative)
    """
    if direction == "buy":
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity


def exit_reason(trade: VirtualTrade, price: Decimal) -> Optional[str]:
    """stop_loss / take_profit when the price crosses one of them, else None"""
    if trade.direction == "buy":
        if trade.stop_loss is not None and price <= trade.stop_loss:
            return "stop_loss"
        if trade.take_profit is not None and price >= trade.take_profit:
            return "take_profit"
    else:
        if trade.stop_loss is not None and price >= trade.stop_loss:
            return "stop_loss"
        if trade.take_profit is not None and price <= trade.take_profit:
            return "take_profit"
    return None


class PaperTradingService:
    """Paper trading for one user"""
    
    def __init__(self, db: AsyncSession, user_id: UUID, feed: Optional[ChangeFeed] = None):
        """
        Args:
            db: database session
            user_id: wallet owner
            feed: change feed for wallet/trade events
        """
        self.db = db
        self.user_id = user_id
        self.feed = feed or change_feed
    
    async def get_wallet(self) -> VirtualWallet:
        """Wallet of the user, created with the starting balance on first access"""
        result = await self.db.execute(
            select(VirtualWallet).where(VirtualWallet.user_id == self.user_id)
        )
        wallet = result.scalar_one_or_none()
        if wallet is not None:
            return wallet
        
        initial = Decimal(str(settings.paper_initial_balance))
        wallet = VirtualWallet(
            user_id=self.user_id,
            balance=initial,
            initial_balance=initial,
            total_profit_loss=Decimal("0"),
            total_trades=0,
            winning_trades=0,
            losing_trades=0,
        )
        self.db.add(wallet)
        await self.db.commit()
        await self.db.refresh(wallet)
        logger.info(f"Virtual wallet created for user {self.user_id}")
        self.feed.publish("virtual_wallets", "INSERT", wallet)
        return wallet
    
    async def list_trades(self, status: Optional[str] = None) -> List[VirtualTrade]:
        query = (
            select(VirtualTrade)
            .where(VirtualTrade.user_id == self.user_id)
            .order_by(VirtualTrade.opened_at.desc())
        )
        if status:
            query = query.where(VirtualTrade.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())
    
    async def get_trade(self, trade_id: UUID) -> VirtualTrade:
        result = await self.db.execute(
            select(VirtualTrade)
            .where(VirtualTrade.user_id == self.user_id)
            .where(VirtualTrade.id == trade_id)
        )
        trade = result.scalar_one_or_none()
        if trade is None:
            raise NotFoundException("الصفقة غير موجودة", {"id": str(trade_id)})
        return trade
    
    async def open_trade(self, request: TradeOpenRequest) -> VirtualTrade:
        """
        Open a paper trade
        
        The amount is debited immediately. Market orders are open at once,
        limit and stop orders start as pending.
        
        Raises:
            InsufficientBalanceException: amount exceeds the balance
        """
        wallet = await self.get_wallet()
        if request.amount > wallet.balance:
            raise InsufficientBalanceException(
                "رصيدك غير كافٍ لهذه الصفقة",
                {"balance": str(wallet.balance), "amount": str(request.amount)},
            )
        
        trade = VirtualTrade(
            user_id=self.user_id,
            wallet_id=wallet.id,
            symbol=request.symbol,
            symbol_name_ar=request.symbol_name_ar,
            direction=request.direction,
            order_type=request.order_type,
            amount=request.amount,
            quantity=request.amount / request.entry_price,
            entry_price=request.entry_price,
            stop_loss=request.stop_loss,
            take_profit=request.take_profit,
            status="open" if request.order_type == "market" else "pending",
            opened_at=datetime.utcnow(),
        )
        self.db.add(trade)
        wallet.balance = wallet.balance - request.amount
        wallet.total_trades = wallet.total_trades + 1
        await self.db.commit()
        await self.db.refresh(trade)
        await self.db.refresh(wallet)
        
        logger.info(
            f"Paper trade opened: {trade.symbol} {trade.direction} "
            f"{trade.amount} @ {trade.entry_price} ({trade.status})"
        )
        self.feed.publish("virtual_trades", "INSERT", trade)
        self.feed.publish("virtual_wallets", "UPDATE", wallet)
        return trade
    
    async def close_trade(self, trade_id: UUID, exit_price: Decimal) -> VirtualTrade:
        """
        Close an open trade at ``exit_price``
        
        Credits ``amount + profit_loss`` to the wallet. A positive P&L counts
        as a win, anything else as a loss.
        
        Raises:
            NotFoundException: unknown trade
            ValidationException: trade is not open
        """
        trade = await self.get_trade(trade_id)
        if trade.status != "open":
            raise ValidationException("الصفقة ليست مفتوحة", {"status": trade.status})
        
        wallet = await self.get_wallet()
        profit_loss = calculate_profit_loss(
            trade.direction, trade.entry_price, exit_price, trade.quantity
        )
        
        trade.exit_price = exit_price
        trade.profit_loss = profit_loss
        trade.status = "closed"
        trade.closed_at = datetime.utcnow()
        
        wallet.balance = wallet.balance + trade.amount + profit_loss
        wallet.total_profit_loss = wallet.total_profit_loss + profit_loss
        if profit_loss > 0:
            wallet.winning_trades = wallet.winning_trades + 1
        else:
            wallet.losing_trades = wallet.losing_trades + 1
        
        await self.db.commit()
        await self.db.refresh(trade)
        await self.db.refresh(wallet)
        
        logger.info(f"Paper trade closed: {trade.symbol} P&L {profit_loss}")
        self.feed.publish("virtual_trades", "UPDATE", trade)
        self.feed.publish("virtual_wallets", "UPDATE", wallet)
        return trade
    
    async def cancel_trade(self, trade_id: UUID) -> VirtualTrade:
        """
        Cancel a pending order and refund its amount
        
        Raises:
            ValidationException: trade is not pending
        """
        trade = await self.get_trade(trade_id)
        if trade.status != "pending":
            raise ValidationException("لا يمكن إلغاء هذه الصفقة", {"status": trade.status})
        
        wallet = await self.get_wallet()
        trade.status = "cancelled"
        trade.closed_at = datetime.utcnow()
        wallet.balance = wallet.balance + trade.amount
        wallet.total_trades = max(wallet.total_trades - 1, 0)
        
        await self.db.commit()
        await self.db.refresh(trade)
        await self.db.refresh(wallet)
        self.feed.publish("virtual_trades", "UPDATE", trade)
        self.feed.publish("virtual_wallets", "UPDATE", wallet)
        return trade
    
    async def check_exit_conditions(self, prices: Dict[str, Decimal]) -> List[VirtualTrade]:
        """
        Close open trades whose stop loss or take profit was reached
        
        Args:
            prices: current price per symbol; symbols without a price are skipped
            
        Returns:
            Trades closed by this call
        """
        closed: List[VirtualTrade] = []
        for trade in await self.list_trades(status="open"):
            price = prices.get(trade.symbol)
            if price is None:
                continue
            reason = exit_reason(trade, price)
            if reason is None:
                continue
            logger.info(f"Paper trade {trade.id} hit {reason} at {price}")
            closed.append(await self.close_trade(trade.id, price))
        return closed
    
    async def reset_wallet(self) -> VirtualWallet:
        """Delete every trade and restore the starting balance"""
        wallet = await self.get_wallet()
        initial = Decimal(str(settings.paper_initial_balance))
        
        await self.db.execute(delete(VirtualTrade).where(VirtualTrade.user_id == self.user_id))
        wallet.balance = initial
        wallet.initial_balance = initial
        wallet.total_profit_loss = Decimal("0")
        wallet.total_trades = 0
        wallet.winning_trades = 0
        wallet.losing_trades = 0
        await self.db.commit()
        await self.db.refresh(wallet)
        
        logger.info(f"Virtual wallet reset for user {self.user_id}")
        self.feed.publish("virtual_trades", "DELETE", {"user_id": self.user_id})
        self.feed.publish("virtual_wallets", "UPDATE", wallet)
        return wallet
    
    async def set_balance(self, balance: Decimal) -> VirtualWallet:
        """Set both the balance and the initial balance"""
        wallet = await self.get_wallet()
        wallet.balance = balance
        wallet.initial_balance = balance
        await self.db.commit()
        await self.db.refresh(wallet)
        self.feed.publish("virtual_wallets", "UPDATE", wallet)
        return wallet
