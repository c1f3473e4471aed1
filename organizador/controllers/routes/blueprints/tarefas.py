"""
Blueprint para gestao de tarefas.

Este modulo expoe o CRUD de tarefas sobre o ``TarefaStore``.

Rotas:
    - GET /Tarefa/<id>: Obtem tarefa pelo ID
    - GET /Tarefa/ObterTodos: Lista todas as tarefas
    - GET /Tarefa/ObterPorTitulo?titulo=: Tarefas cujo titulo contem o texto
    - GET /Tarefa/ObterPorData?data=: Tarefas do dia informado
    - GET /Tarefa/ObterPorStatus?status=: Tarefas com o status informado
    - POST /Tarefa: Cria tarefa
    - PUT /Tarefa/<id>: Atualiza tarefa
    - DELETE /Tarefa/<id>: Remove tarefa

Dependencias:
    - models: Tarefa
    - services: TarefaStore
"""

from flask import Blueprint, jsonify, request, url_for

from organizador import db
from organizador.controllers.routes._error_handlers import erro_response, not_found_response
from organizador.controllers.routes._validators import (
    TarefaInvalidaError,
    parse_data,
    parse_status,
    parse_tarefa_payload,
)
from organizador.models.tables import Tarefa
from organizador.services.tarefas import TarefaStore


# =============================================================================
# BLUEPRINT DEFINITION
# =============================================================================

tarefas_bp = Blueprint('tarefas', __name__, url_prefix='/Tarefa')


def _store() -> TarefaStore:
    return TarefaStore(db.session)


def _listar(tarefas: list[Tarefa]):
    return jsonify([tarefa.to_dict() for tarefa in tarefas])


@tarefas_bp.errorhandler(TarefaInvalidaError)
def _handle_tarefa_invalida(error: TarefaInvalidaError):
    return erro_response(error.mensagem, 400)


# =============================================================================
# CONSULTAS
# =============================================================================

@tarefas_bp.route("/<int:id>", methods=["GET"])
def obter_por_id(id: int):
    """
    Obtem uma tarefa pelo ID.

    Returns:
        200: Tarefa encontrada
        404: Tarefa inexistente (corpo vazio)
    """
    tarefa = _store().obter_por_id(id)
    if tarefa is None:
        return not_found_response()
    return jsonify(tarefa.to_dict())


@tarefas_bp.route("/ObterTodos", methods=["GET"])
def obter_todos():
    """Lista todas as tarefas em ordem de ID."""
    return _listar(_store().obter_todos())


@tarefas_bp.route("/ObterPorTitulo", methods=["GET"])
def obter_por_titulo():
    """Lista tarefas cujo titulo contem o parametro ``titulo``."""
    titulo = request.args.get("titulo", "")
    return _listar(_store().obter_por_titulo(titulo))


@tarefas_bp.route("/ObterPorData", methods=["GET"])
def obter_por_data():
    """
    Lista tarefas da data informada, ignorando o horario.

    Returns:
        200: Lista (possivelmente vazia)
        400: Parametro ``data`` invalido
    """
    data = parse_data(request.args.get("data"))
    return _listar(_store().obter_por_data(data))


@tarefas_bp.route("/ObterPorStatus", methods=["GET"])
def obter_por_status():
    """
    Lista tarefas com o status informado (inteiro ou nome).

    Returns:
        200: Lista (possivelmente vazia)
        400: Status desconhecido
    """
    status = parse_status(request.args.get("status"))
    return _listar(_store().obter_por_status(status))


# =============================================================================
# ALTERACOES
# =============================================================================

@tarefas_bp.route("", methods=["POST"])
@tarefas_bp.route("/", methods=["POST"])
def criar():
    """
    Cria uma nova tarefa.

    Returns:
        201: Tarefa criada, com header Location para obter_por_id
        400: Tarefa nula ou data vazia
    """
    dados = parse_tarefa_payload(request.get_json(silent=True))

    tarefa = _store().inserir(Tarefa(**dados))

    response = jsonify(tarefa.to_dict())
    response.status_code = 201
    response.headers["Location"] = url_for("tarefas.obter_por_id", id=tarefa.id, _external=True)
    return response


@tarefas_bp.route("/<int:id>", methods=["PUT"])
def atualizar(id: int):
    """
    Atualiza titulo, descricao, data e status de uma tarefa existente.

    Returns:
        200: Tarefa atualizada
        404: Tarefa inexistente
        400: Tarefa nula ou data vazia
    """
    store = _store()
    tarefa = store.obter_por_id(id)
    if tarefa is None:
        return not_found_response()

    dados = parse_tarefa_payload(request.get_json(silent=True))

    tarefa.titulo = dados["titulo"]
    tarefa.descricao = dados["descricao"]
    tarefa.data = dados["data"]
    tarefa.status = dados["status"]

    store.atualizar(tarefa)
    return jsonify(tarefa.to_dict())


@tarefas_bp.route("/<int:id>", methods=["DELETE"])
def deletar(id: int):
    """
    Remove uma tarefa.

    Returns:
        204: Tarefa removida
        404: Tarefa inexistente
    """
    store = _store()
    tarefa = store.obter_por_id(id)
    if tarefa is None:
        return not_found_response()

    store.remover(tarefa)
    return ("", 204)
