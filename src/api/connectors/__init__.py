"""Connectors por canal — adapters de borda para APIs externas.

Estrutura:
- wuzapi/: gateway WUZAPI (webhook inbound, API REST de LID/grupos/envio)

Cada canal tem seu próprio connector, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
