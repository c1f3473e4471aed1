"""Persistence layer for :class:`Tarefa` records.

``TarefaStore`` wraps a SQLAlchemy session received through its constructor.
Reads return ORM instances (or ``None``); writes commit before returning and
roll the session back when the database rejects the change.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from organizador.models.tables import EnumStatusTarefa, Tarefa

logger = logging.getLogger(__name__)

ID_MINIMO = -(2 ** 63)
ID_MAXIMO = 2 ** 63 - 1


class TarefaStore:
    """Durable storage and querying of tasks."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    def obter_por_id(self, tarefa_id: int) -> Tarefa | None:
        # ids fora de BIGINT nao existem; o driver falharia ao converter
        if not ID_MINIMO <= tarefa_id <= ID_MAXIMO:
            return None
        return self.session.get(Tarefa, tarefa_id)

    def obter_todos(self) -> list[Tarefa]:
        return self._listar(sa.select(Tarefa))

    def obter_por_titulo(self, titulo: str) -> list[Tarefa]:
        """Tasks whose title contains ``titulo``; matching follows the DB collation."""
        query = sa.select(Tarefa).where(Tarefa.titulo.contains(titulo, autoescape=True))
        return self._listar(query)

    def obter_por_data(self, data: date | datetime) -> list[Tarefa]:
        """Tasks on the same calendar day as ``data``, ignoring the time of day."""
        dia = data.date() if isinstance(data, datetime) else data
        inicio = datetime.combine(dia, time.min)
        query = sa.select(Tarefa).where(Tarefa.data >= inicio)
        try:
            fim = inicio + timedelta(days=1)
        except OverflowError:
            # date.max: nao existe dia seguinte
            return self._listar(query)
        return self._listar(query.where(Tarefa.data < fim))

    def obter_por_status(self, status: EnumStatusTarefa) -> list[Tarefa]:
        return self._listar(sa.select(Tarefa).where(Tarefa.status == status))

    def _listar(self, query) -> list[Tarefa]:
        return list(self.session.scalars(query.order_by(Tarefa.id.asc())).all())

    # ------------------------------------------------------------------
    # Alteracoes
    # ------------------------------------------------------------------

    def inserir(self, tarefa: Tarefa) -> Tarefa:
        self.session.add(tarefa)
        self._commit("criar")
        logger.info("Tarefa %s criada", tarefa.id)
        return tarefa

    def atualizar(self, tarefa: Tarefa) -> Tarefa:
        self.session.add(tarefa)
        self._commit("atualizar")
        logger.info("Tarefa %s atualizada", tarefa.id)
        return tarefa

    def remover(self, tarefa: Tarefa) -> None:
        tarefa_id = tarefa.id
        self.session.delete(tarefa)
        self._commit("remover")
        logger.info("Tarefa %s removida", tarefa_id)

    def _commit(self, operacao: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Falha ao %s tarefa", operacao)
            raise
