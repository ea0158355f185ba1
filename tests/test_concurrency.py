"""Dos aperturas simultáneas del mismo cajero: exactamente una gana."""
import threading
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cashdrawer.database import Base
from cashdrawer.exceptions import ConflictError
from cashdrawer.models import CashSession, User
from cashdrawer.services.session_manager import SessionLifecycleManager

from cashdrawer.init_db import seed_demo


def test_concurrent_opens_yield_one_session(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'caja.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with Factory() as db:
        org = seed_demo(db)
        store_id, cashier_id = org.store_a.id, org.cashier_a.id

    barrier = threading.Barrier(4)
    outcomes = []
    lock = threading.Lock()

    def attempt():
        with Factory() as db:
            cashier = db.get(User, cashier_id)
            barrier.wait()
            try:
                SessionLifecycleManager(db).open(cashier, store_id, Decimal("100"))
                result = "ok"
            except ConflictError:
                result = "conflict"
            with lock:
                outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict", "conflict", "conflict", "ok"]
    with Factory() as db:
        assert db.query(CashSession).filter(CashSession.cashier_id == cashier_id).count() == 1
    engine.dispose()
