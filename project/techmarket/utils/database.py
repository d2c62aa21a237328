# techmarket/utils/database.py

from sqlalchemy import event, func
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from techmarket.config import settings

# ────────────── Base for models ──────────────
Base = declarative_base()


def normalize_async_url(url: str) -> str:
    """Point plain sqlite URLs at the aiosqlite driver."""
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


SQLALCHEMY_DATABASE_URL = normalize_async_url(settings.DATABASE_URL)

# ────────────── Async engine ──────────────
# sqlite: a fresh connection per session, so sessions never share a connection
engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=False,
    poolclass=NullPool if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else None,
)

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_pragmas(dbapi_connection, _):
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA busy_timeout=5000;")
        cur.close()

# ────────────── Async session ──────────────
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# ────────────── Sample catalog ──────────────
SEED_PRODUCTS = [
    {
        "title": "UltraCharge 20000mAh Power Bank",
        "description": "High-capacity portable charger with fast charging support for all devices.",
        "price": 2499,
        "category": "Power Banks",
        "image": "https://images.unsplash.com/photo-1609091839311-d5365f9ff1c5?auto=format&fit=crop&w=800&q=80",
        "seller_name": "TechGear Official",
    },
    {
        "title": "SonicBlast Pro Wireless Speaker",
        "description": "Immersive 360-degree sound with deep bass and 24-hour battery life.",
        "price": 8999,
        "category": "Speakers",
        "image": "https://images.unsplash.com/photo-1608043152269-423dbba4e7e1?auto=format&fit=crop&w=800&q=80",
        "seller_name": "AudioMaster",
    },
    {
        "title": "ProBook X1 Carbon",
        "description": "Ultra-slim laptop with 4K display, i7 processor, and 1TB SSD.",
        "price": 124999,
        "category": "Laptops",
        "image": "https://images.unsplash.com/photo-1496181133206-80ce9b88a853?auto=format&fit=crop&w=800&q=80",
        "seller_name": "LaptopWorld",
    },
    {
        "title": "HyperFast 65W GaN Charger",
        "description": "Compact fast charger for laptops, tablets, and phones.",
        "price": 1999,
        "category": "Chargers",
        "image": "https://images.unsplash.com/photo-1583863788434-e58a36330cf0?auto=format&fit=crop&w=800&q=80",
        "seller_name": "PowerUp",
    },
    {
        "title": "Zenith Noise Cancelling Headphones",
        "description": "Premium over-ear headphones with industry-leading noise cancellation.",
        "price": 24999,
        "category": "Headphones",
        "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?auto=format&fit=crop&w=800&q=80",
        "seller_name": "AudioMaster",
    },
]


# ────────────── Database initialization ──────────────
async def init_db() -> int:
    """
    Creates all tables that do not exist yet.
    When the products table is empty, inserts the sample catalog.

    Returns the number of seeded products (0 when the catalog already had rows).
    """
    # models must be imported so their tables are registered on Base
    from techmarket.models.product import Product
    from techmarket.models.order import Order  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        count = await session.scalar(select(func.count()).select_from(Product))
        if count:
            return 0

        session.add_all([Product(**p) for p in SEED_PRODUCTS])
        await session.commit()
        return len(SEED_PRODUCTS)
