"""
Handlers de rotas Flask para a API de tarefas.

As rotas ficam em blueprints separados em:
    organizador/controllers/routes/blueprints/

ARQUIVOS AUXILIARES:
    - _error_handlers.py: Tratamento centralizado de erros
    - _validators.py: Validacao do corpo e da query string
"""

from flask import Flask


def register_blueprints(flask_app: Flask) -> None:
    """
    Registra blueprints e error handlers da aplicacao.

    Args:
        flask_app: Instancia da aplicacao Flask.
    """
    from organizador.controllers.routes._error_handlers import register_error_handlers
    from organizador.controllers.routes.blueprints import register_all_blueprints

    register_error_handlers(flask_app)
    register_all_blueprints(flask_app)
