"""
Crear (o resetear) el usuario administrador inicial.

Los usuarios solo se dan de alta desde la API por un ADMINISTRADOR, así que
el primero se crea con este script.

Uso:
    python scripts/create_admin.py --email admin@empresa.com --password secreto --name "Admin"
"""
import argparse
import sys

from app.config.database import Database
from app.config.settings import settings
from app.core.auth.permissions import Role
from app.core.auth.security import hash_password
from app.shared.database.models import User


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Crear usuario ADMINISTRADOR")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrador")
    parser.add_argument("--codigo", default=None)
    args = parser.parse_args(argv)

    if len(args.password) < 6:
        print("La contraseña debe tener al menos 6 caracteres")
        return 1

    database = Database(settings.database_url)
    database.create_all()
    db = database.session()
    try:
        email = args.email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.password_hash = hash_password(args.password)
            user.role = Role.ADMINISTRADOR.value
            print(f"[UPDATED] {email} ahora es ADMINISTRADOR")
        else:
            db.add(User(
                full_name=args.name,
                email=email,
                password_hash=hash_password(args.password),
                codigo=args.codigo,
                role=Role.ADMINISTRADOR.value
            ))
            print(f"[CREATED] {email}")
        db.commit()
    finally:
        db.close()
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
