"""
User-facing messages (Portuguese, matching the web app's toasts).

Raw model output and exception details never go in these strings.
"""

PROVIDER_UNAVAILABLE = "Falha ao processar com Inteligência Artificial."
MALFORMED_INTENT = "Falha ao interpretar a resposta da IA."
UNKNOWN_ACTION = "Não entendi o comando. Tente novamente."
EVENT_NOT_FOUND = 'Evento "{reference}" não encontrado.'
TASK_NOT_IMPLEMENTED = "Ainda estamos implementando a criação de tarefas!"
NEEDS_CONFIRMATION = "Confirme o comando antes de continuar."

TRANSACTION_CREATED = "Transação registrada com sucesso!"
EVENT_CREATED = 'Evento "{title}" criado com sucesso!'
EVENT_MISSING_START = "Não consegui identificar a data do evento."
EVENT_ENDS_BEFORE_START = "O evento não pode terminar antes de começar."
EVENT_DELETED = 'Evento "{title}" excluído.'
EVENT_UPDATED = 'Evento "{title}" atualizado.'
EVENT_NOTHING_TO_CHANGE = "Nada para alterar no evento."
