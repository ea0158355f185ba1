"""
Poblado inicial para desarrollo: dos tiendas, un admin, gerentes y cajeros.

    python -m cashdrawer.init_db

PIN de validación: manager_a y admin -> 123456, manager_b -> 654321.
"""
from types import SimpleNamespace

from cashdrawer.crud import pins as pin_store
from cashdrawer.database import SessionLocal, engine, Base
from cashdrawer.models import Store, User, Role
from cashdrawer.security import hash_pin

DEMO_PIN = "123456"
DEMO_PIN_STORE_B = "654321"


def seed_demo(db):
    """Crea tiendas, usuarios y PIN de demo. Devuelve los objetos creados."""
    store_a = Store(name="Tienda Centro", address="Av. Reforma #123")
    store_b = Store(name="Tienda Norte")
    db.add_all([store_a, store_b])
    db.flush()

    def user(username, role, store):
        u = User(
            username=username,
            full_name=username.replace("_", " ").title(),
            role=role,
            store_id=store.id if store else None,
        )
        db.add(u)
        return u

    data = SimpleNamespace(
        store_a=store_a,
        store_b=store_b,
        admin=user("admin", Role.ADMIN, None),
        manager_a=user("manager_a", Role.MANAGER, store_a),
        manager_b=user("manager_b", Role.MANAGER, store_b),
        cashier_a=user("cashier_a", Role.CASHIER, store_a),
        cashier_a2=user("cashier_a2", Role.CASHIER, store_a),
        cashier_b=user("cashier_b", Role.CASHIER, store_b),
    )
    db.commit()

    pin_store.upsert_pin(db, data.manager_a.id, hash_pin(DEMO_PIN))
    pin_store.upsert_pin(db, data.admin.id, hash_pin(DEMO_PIN))
    pin_store.upsert_pin(db, data.manager_b.id, hash_pin(DEMO_PIN_STORE_B))
    return data


def init_db():
    print("--- Creando Tablas ---")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(Store).first():
            print("La base ya tiene datos, no se siembra nada.")
            return
        seed_demo(db)
        print("✅ Tiendas, usuarios y PIN de demo creados.")
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
