"""Paper trading"""
from .service import PaperTradingService, calculate_profit_loss, exit_reason

__all__ = ["PaperTradingService", "calculate_profit_loss", "exit_reason"]
