"""Database models used by the application."""

from datetime import datetime
from enum import IntEnum

from sqlalchemy.types import Integer, TypeDecorator

from organizador import db


# Valor usado como "data nao informada"
DATA_VAZIA = datetime.min


class EnumStatusTarefa(IntEnum):
    """Enumeration of possible task states, encoded as stable integers."""
    PENDENTE = 0
    FINALIZADO = 1


class IntEnumType(TypeDecorator):
    """Persist an ``IntEnum`` member as its integer value."""

    impl = Integer
    cache_ok = True

    def __init__(self, enum_class, **kwargs):
        super().__init__(**kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(self.enum_class(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.enum_class(value)


class Tarefa(db.Model):
    """Represents a to-do item with title, description, date and status."""
    __tablename__ = "tarefas"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    titulo = db.Column(db.Text)
    descricao = db.Column(db.Text)
    data = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(
        IntEnumType(EnumStatusTarefa),
        nullable=False,
        default=EnumStatusTarefa.PENDENTE,
        index=True,
    )

    def __repr__(self):
        return f"<Tarefa {self.id} {self.titulo!r}>"

    def to_dict(self) -> dict:
        """Return the wire representation of the task."""
        return {
            "Id": self.id,
            "Titulo": self.titulo,
            "Descricao": self.descricao,
            "Data": self.data.isoformat() if self.data else None,
            "Status": int(self.status) if self.status is not None else None,
        }
