"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhook do gateway, health)
- Validação inicial de request (headers, corpo)
- Delegação para connectors/use_cases
- Respostas HTTP apropriadas

Estrutura:
- routes/wuzapi/: webhook do gateway WUZAPI
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
