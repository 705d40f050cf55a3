from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Float, Text, ForeignKey, Numeric, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

# ===== USUARIOS =====

class User(Base):
    """Usuario del sistema (vendedor, supervisor, gerente, administrador)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    codigo = Column(String(50), unique=True)
    role = Column(String(50), default='VENDEDOR', nullable=False)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    affiliations = relationship(
        "Affiliation",
        back_populates="vendor",
        foreign_keys="Affiliation.user_id",
        passive_deletes="all"
    )

# ===== DATOS DE REFERENCIA =====

class Plan(Base):
    """Plan comercial ofrecido en las fichas"""
    __tablename__ = "planes"

    id = Column(Integer, primary_key=True, index=True)
    value = Column(String(100), unique=True, nullable=False)
    label = Column(String(255), nullable=False)
    tipo = Column(String(100))
    titulo = Column(String(255))
    importe_grupo_familiar = Column(Numeric(12, 2))
    importe_individual = Column(Numeric(12, 2))
    importe_adherente = Column(Numeric(12, 2))

class Empresa(Base):
    """Empresa empleadora del titular"""
    __tablename__ = "empresas"

    id = Column(Integer, primary_key=True, index=True)
    value = Column(String(100), unique=True, nullable=False)
    label = Column(String(255), nullable=False)

# ===== FICHAS =====

class Affiliation(Base):
    """Ficha de afiliación cargada por un vendedor"""
    __tablename__ = "affiliations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    form_data = Column(JSON, nullable=False, default=dict)

    # Campos promovidos desde form_data
    titular_nombre = Column(String(255))
    titular_dni = Column(String(50), index=True)
    plan = Column(String(100), ForeignKey("planes.value"), index=True)
    empresa = Column(String(100), index=True)  # referencia blanda a empresas.value
    total = Column(Numeric(12, 2))

    status = Column(String(20), default='Abierta', nullable=False, index=True)
    # Se incrementa en cada escritura; las transiciones que leen form_data lo exigen en el WHERE
    version = Column(Integer, default=1, nullable=False)

    latitud = Column(Float)
    longitud = Column(Float)
    domicilio_latitud = Column(Float)
    domicilio_longitud = Column(Float)

    fecha_creacion = Column(DateTime, default=datetime.now, nullable=False, index=True)

    status_change_user_id = Column(Integer, ForeignKey("users.id"))
    status_change_timestamp = Column(DateTime)
    rechazo_motivo = Column(Text)

    # Relationships
    vendor = relationship("User", back_populates="affiliations", foreign_keys=[user_id])
    status_change_user = relationship("User", foreign_keys=[status_change_user_id])
    fotos = relationship(
        "AffiliationFoto",
        back_populates="affiliation",
        order_by="AffiliationFoto.fecha_subida"
    )

class AffiliationFoto(Base):
    """Metadatos de una foto adjunta; el binario vive en el almacenamiento externo"""
    __tablename__ = "affiliation_fotos"

    id = Column(Integer, primary_key=True, index=True)
    affiliation_id = Column(Integer, ForeignKey("affiliations.id"), nullable=False, index=True)
    public_id = Column(String(255), nullable=False)
    formato = Column(String(20))
    descripcion = Column(String(255))
    fecha_subida = Column(DateTime, default=datetime.now, nullable=False)

    # Relationships
    affiliation = relationship("Affiliation", back_populates="fotos")
