"""
Validadores de entrada de dados para a API de tarefas.

Este modulo centraliza a conversao do corpo JSON e da query string em
valores tipados, levantando ``TarefaInvalidaError`` com a mensagem que
sera devolvida ao cliente no campo ``Erro``.

Funcoes de Validacao:
    - parse_tarefa_payload: Corpo JSON de criacao/atualizacao
    - parse_data: Data ISO-8601 (data ou data/hora)
    - parse_status: Valor de EnumStatusTarefa (inteiro ou nome)
"""

from datetime import datetime, timezone
from typing import Any

from organizador.models.tables import DATA_VAZIA, EnumStatusTarefa


MENSAGEM_TAREFA_NULA = "A tarefa não pode ser nula"
MENSAGEM_DATA_VAZIA = "A data da tarefa não pode ser vazia"
MENSAGEM_DATA_INVALIDA = "A data da tarefa é inválida"
MENSAGEM_STATUS_INVALIDO = "O status da tarefa é inválido"


class TarefaInvalidaError(ValueError):
    """Entrada rejeitada; ``mensagem`` e exposta ao cliente."""

    def __init__(self, mensagem: str):
        super().__init__(mensagem)
        self.mensagem = mensagem


# =============================================================================
# VALORES ESCALARES
# =============================================================================

def parse_data(raw: Any) -> datetime:
    """
    Converte texto ISO-8601 em datetime sem timezone.

    Valores com timezone sao convertidos para UTC. ``None`` e texto vazio
    viram ``DATA_VAZIA``.

    Raises:
        TarefaInvalidaError: Texto que nao e uma data valida.
    """
    if raw is None:
        return DATA_VAZIA
    if not isinstance(raw, str):
        raise TarefaInvalidaError(MENSAGEM_DATA_INVALIDA)
    raw = raw.strip()
    if not raw:
        return DATA_VAZIA
    try:
        valor = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise TarefaInvalidaError(MENSAGEM_DATA_INVALIDA) from exc
    if valor.tzinfo is not None:
        try:
            valor = valor.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as exc:
            # fora do intervalo datetime.min..datetime.max em UTC
            raise TarefaInvalidaError(MENSAGEM_DATA_INVALIDA) from exc
    return valor


def parse_status(raw: Any) -> EnumStatusTarefa:
    """
    Converte inteiro ou nome (sem diferenciar maiusculas) em EnumStatusTarefa.

    ``None`` e texto vazio resultam em ``PENDENTE``.
    """
    if raw is None:
        return EnumStatusTarefa.PENDENTE
    if isinstance(raw, bool):
        raise TarefaInvalidaError(MENSAGEM_STATUS_INVALIDO)
    if isinstance(raw, int):
        try:
            return EnumStatusTarefa(raw)
        except ValueError as exc:
            raise TarefaInvalidaError(MENSAGEM_STATUS_INVALIDO) from exc
    if isinstance(raw, str):
        texto = raw.strip()
        if not texto:
            return EnumStatusTarefa.PENDENTE
        if texto.lstrip("-").isdigit():
            return parse_status(int(texto))
        try:
            return EnumStatusTarefa[texto.upper()]
        except KeyError as exc:
            raise TarefaInvalidaError(MENSAGEM_STATUS_INVALIDO) from exc
    raise TarefaInvalidaError(MENSAGEM_STATUS_INVALIDO)


def _texto_opcional(valor: Any, campo: str) -> str | None:
    if valor is None or isinstance(valor, str):
        return valor
    raise TarefaInvalidaError(f"O campo {campo} deve ser um texto")


# =============================================================================
# CORPO DA REQUISICAO
# =============================================================================

def parse_tarefa_payload(payload: Any) -> dict[str, Any]:
    """
    Valida o corpo JSON de uma tarefa.

    Nomes de propriedade sao comparados sem diferenciar maiusculas
    (``Titulo``, ``titulo``). ``Id`` e ignorado.

    Args:
        payload: Resultado de ``request.get_json(silent=True)``.

    Returns:
        dict: Campos ``titulo``, ``descricao``, ``data`` e ``status``.

    Raises:
        TarefaInvalidaError: Corpo nulo, data vazia ou campo invalido.
    """
    if not isinstance(payload, dict):
        raise TarefaInvalidaError(MENSAGEM_TAREFA_NULA)

    campos = {str(chave).lower(): valor for chave, valor in payload.items()}

    data = parse_data(campos.get("data"))
    if data == DATA_VAZIA:
        raise TarefaInvalidaError(MENSAGEM_DATA_VAZIA)

    return {
        "titulo": _texto_opcional(campos.get("titulo"), "Titulo"),
        "descricao": _texto_opcional(campos.get("descricao"), "Descricao"),
        "data": data,
        "status": parse_status(campos.get("status")),
    }
