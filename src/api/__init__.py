"""API — camada de borda e adapters de canais.

Responsabilidades:
- Receber requests de canais externos (webhooks)
- Identificar o tenant pela credencial do gateway
- Normalizar dados para modelos internos
- Consultar APIs externas (LID, info de grupo, envio de texto)

Subpastas:
- connectors/: adapters HTTP por canal
- normalizers/: conversão de payloads externos → modelos internos
- routes/: endpoints HTTP por canal (webhooks, health)

NÃO PODE conter: regras de roteamento, persistência, orquestração de use cases.
"""
