"""API: camada de borda.

Responsabilidades:
- Receber requests do endpoint de Flows e validar assinaturas
- Falar com a Graph API (transporte HTTP)

Subpastas:
- connectors/: adapters HTTP por canal
- routes/: endpoints HTTP (FastAPI)

NÃO PODE conter: regras de criptografia ou conversão de chaves (ficam em app/).
"""
