"""App — coração do sistema: roteamento, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso (roteamento inbound, mutações, dispatch)
- services/: serviços de aplicação (identidade de contato e grupo)
- domain/: modelos canônicos (mensagem normalizada, JIDs, cotas)
- infra/: implementações concretas de IO
- protocols/: contratos/interfaces
- observability/: correlation id e métricas em log estruturado
- constants/: constantes da aplicação

Padrão: app executa; api adapta; config configura; utils apoia.
"""
