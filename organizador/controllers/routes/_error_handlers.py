"""
Handlers de erro centralizados para a aplicacao.

Este modulo centraliza o tratamento de erros HTTP e excecoes,
garantindo respostas JSON consistentes no formato ``{"Erro": mensagem}``.

Error Handlers:
    - 404: Recurso nao encontrado (corpo vazio)
    - 405: Metodo nao permitido
    - 500: Erro interno do servidor
    - SQLAlchemyError: Erros de banco de dados

Funcoes Auxiliares:
    - erro_response: Resposta JSON padronizada para erros
    - not_found_response: Resposta 404 sem corpo
"""

from flask import Flask, Response, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from organizador import db


# =============================================================================
# FUNCOES AUXILIARES
# =============================================================================

def erro_response(message: str, status_code: int) -> tuple[Response, int]:
    """
    Cria resposta JSON padronizada para erros.

    Args:
        message: Mensagem descritiva exposta ao cliente.
        status_code: Codigo HTTP do erro.

    Returns:
        tuple[Response, int]: Resposta JSON e codigo de status.
    """
    return jsonify({"Erro": message}), status_code


def not_found_response() -> tuple[str, int]:
    """Resposta 404 sem corpo."""
    return ("", 404)


# =============================================================================
# REGISTRO DE ERROR HANDLERS
# =============================================================================

def register_error_handlers(app: Flask) -> None:
    """
    Registra todos os error handlers na aplicacao Flask.

    Args:
        app: Instancia da aplicacao Flask.
    """

    @app.errorhandler(404)
    def handle_not_found(e):
        return not_found_response()

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return erro_response("Método não permitido", 405)

    @app.errorhandler(500)
    def handle_internal_error(e):
        """
        Trata erros 500 - Erro interno do servidor.

        Registra excecao e faz rollback de transacoes pendentes.
        """
        from organizador.utils.logging_config import log_exception
        log_exception(getattr(e, "original_exception", None) or e, request)

        db.session.rollback()

        return erro_response("Erro interno do servidor", 500)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        """
        Trata erros de banco de dados.

        Registra excecao e faz rollback da transacao falha.
        """
        from organizador.utils.logging_config import log_exception
        log_exception(e, request)

        db.session.rollback()

        return erro_response("Erro ao acessar o banco de dados", 500)
