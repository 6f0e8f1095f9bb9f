"""
Suite de tests para la migración billing MongoDB → PostgreSQL.

Los tests NO tocan bases reales: usan almacenes en memoria (helpers.py)
con la misma interfaz que MongoSource / PostgresDestination, y validan:
- Configuración y orden de pasos
- Interfaz de migradores y coherencia con dbsetup.py
- Saneamiento de fechas, decodificación y clasificación de cargos
- Idempotencia de re-corridas y aborto del orquestador
"""
