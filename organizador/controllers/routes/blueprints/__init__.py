"""
Registro centralizado de blueprints da aplicacao.

Blueprints Disponiveis:
    - health_bp: Health check (/health)
    - tarefas_bp: CRUD de tarefas (/Tarefa/*)

Uso:
    from organizador.controllers.routes.blueprints import register_all_blueprints
    register_all_blueprints(app)
"""

from flask import Flask


def register_all_blueprints(app: Flask) -> None:
    """
    Registra todos os blueprints na aplicacao Flask.

    Args:
        app: Instancia da aplicacao Flask.
    """
    # Health - verificacao de banco (/health)
    from organizador.controllers.routes.blueprints.health import health_bp
    app.register_blueprint(health_bp)

    # Tarefas - CRUD (/Tarefa, /Tarefa/<id>, /Tarefa/ObterTodos, ...)
    from organizador.controllers.routes.blueprints.tarefas import tarefas_bp
    app.register_blueprint(tarefas_bp)
