"""Initial database schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-03-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB


# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Users
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), onupdate=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    
    # Telegram signals
    op.create_table(
        'signals',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('asset', sa.String(30), nullable=False),
        sa.Column('timeframe', sa.String(10), nullable=False),
        sa.Column('direction', sa.String(10), nullable=False),
        sa.Column('amount', sa.Numeric(20, 2), nullable=False, server_default='1'),
        sa.Column('raw_message', sa.Text()),
        sa.Column('telegram_message_id', sa.BigInteger(), unique=True),
        sa.Column('entry_time', sa.Time()),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('result', sa.String(10)),
        sa.Column('received_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_signals_telegram_message_id', 'signals', ['telegram_message_id'])
    op.create_index('ix_signals_received_at', 'signals', ['received_at'])
    op.create_index('ix_signals_status_received_at', 'signals', ['status', 'received_at'])
    
    # Paper trading
    op.create_table(
        'virtual_wallets',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column('balance', sa.Numeric(20, 8), nullable=False, server_default='1000'),
        sa.Column('initial_balance', sa.Numeric(20, 8), nullable=False, server_default='1000'),
        sa.Column('total_profit_loss', sa.Numeric(20, 8), nullable=False, server_default='0'),
        sa.Column('total_trades', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('winning_trades', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('losing_trades', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    
    op.create_table(
        'virtual_trades',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('wallet_id', UUID(as_uuid=True), nullable=False),
        sa.Column('symbol', sa.String(30), nullable=False),
        sa.Column('symbol_name_ar', sa.String(100)),
        sa.Column('direction', sa.String(10), nullable=False),
        sa.Column('order_type', sa.String(10), nullable=False, server_default='market'),
        sa.Column('amount', sa.Numeric(20, 8), nullable=False),
        sa.Column('quantity', sa.Numeric(20, 8), nullable=False),
        sa.Column('entry_price', sa.Numeric(20, 8), nullable=False),
        sa.Column('exit_price', sa.Numeric(20, 8)),
        sa.Column('stop_loss', sa.Numeric(20, 8)),
        sa.Column('take_profit', sa.Numeric(20, 8)),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('profit_loss', sa.Numeric(20, 8)),
        sa.Column('opened_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('closed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['wallet_id'], ['virtual_wallets.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_virtual_trades_user_id', 'virtual_trades', ['user_id'])
    
    # Web Push
    op.create_table(
        'push_subscriptions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('endpoint', sa.Text(), nullable=False),
        sa.Column('p256dh', sa.Text(), nullable=False),
        sa.Column('auth', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'endpoint', name='uq_push_subscriptions_user_endpoint'),
    )
    
    # Price alerts
    op.create_table(
        'price_alerts',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('symbol', sa.String(30), nullable=False),
        sa.Column('symbol_name_ar', sa.String(100), nullable=False, server_default=''),
        sa.Column('symbol_name_en', sa.String(100), nullable=False, server_default=''),
        sa.Column('category', sa.String(30), nullable=False, server_default='crypto'),
        sa.Column('target_price', sa.Numeric(20, 8), nullable=False),
        sa.Column('condition', sa.String(10), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('triggered_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_price_alerts_user_id', 'price_alerts', ['user_id'])
    
    # Favorites
    op.create_table(
        'user_favorites',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('symbol', sa.String(30), nullable=False),
        sa.Column('symbol_name_ar', sa.String(100), nullable=False, server_default=''),
        sa.Column('symbol_name_en', sa.String(100), nullable=False, server_default=''),
        sa.Column('category', sa.String(30), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'symbol', name='uq_user_favorites_user_symbol'),
    )
    op.create_index('ix_user_favorites_user_id', 'user_favorites', ['user_id'])
    
    # Daily journal
    op.create_table(
        'user_daily_journal',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('trade_date', sa.Date(), nullable=False),
        sa.Column('symbol', sa.String(30)),
        sa.Column('direction', sa.String(10)),
        sa.Column('entry_price', sa.Numeric(20, 8)),
        sa.Column('exit_price', sa.Numeric(20, 8)),
        sa.Column('profit_loss', sa.Numeric(20, 8)),
        sa.Column('result', sa.String(20)),
        sa.Column('notes', sa.Text()),
        sa.Column('daily_goal', sa.Numeric(20, 2)),
        sa.Column('daily_achieved', sa.Numeric(20, 2)),
        sa.Column('lessons_learned', sa.Text()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_user_daily_journal_user_id', 'user_daily_journal', ['user_id'])
    
    # Trading goals
    op.create_table(
        'trading_goals',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('initial_capital', sa.Numeric(20, 2), nullable=False),
        sa.Column('target_amount', sa.Numeric(20, 2), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('market_type', sa.String(20), nullable=False),
        sa.Column('loss_compensation_rate', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_trading_goals_user_id', 'trading_goals', ['user_id'])
    
    # In-app notifications
    op.create_table(
        'user_notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(30), nullable=False, server_default='general'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('data', JSONB),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_user_notifications_user_id', 'user_notifications', ['user_id'])


def downgrade() -> None:
    op.drop_table('user_notifications')
    op.drop_table('trading_goals')
    op.drop_table('user_daily_journal')
    op.drop_table('user_favorites')
    op.drop_table('price_alerts')
    op.drop_table('push_subscriptions')
    op.drop_table('virtual_trades')
    op.drop_table('virtual_wallets')
    op.drop_table('signals')
    op.drop_index('ix_users_email')
    op.drop_table('users')
