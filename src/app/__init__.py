"""App: núcleo do canal de Flows (criptografia, chaves, deploy).

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (data exchange, deploy de Flow JSON)
- flow_json/: conversão de chaves camelCase <-> wire e hash canônico
- infra/: implementações concretas de IO (crypto, stores)
- protocols/: contratos/interfaces
- observability/: correlation id e métricas em log

Padrão: app executa; api adapta; config parametriza; utils apoia.
"""
