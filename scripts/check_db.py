# scripts/check_db.py
import sys
from pathlib import Path
from sqlalchemy import func, select, text

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from scholarship_gate.infrastructure.database.models import AuditLog, RestrictedDate
from scholarship_gate.infrastructure.database.session import AsyncSessionLocal, engine, init_db


async def check_connection():
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())

    await init_db(engine)
    async with AsyncSessionLocal() as session:
        audits = await session.scalar(select(func.count()).select_from(AuditLog))
        holidays = await session.scalar(select(func.count()).select_from(RestrictedDate))
        print("Audit records:", audits)
        print("Restricted dates:", holidays)

    await engine.dispose()

asyncio.run(check_connection())
