"""
Migradores para transformar colecciones billing de MongoDB a tablas PostgreSQL.

Cada migrador implementa la interfaz BaseMigrator y se carga dinámicamente
en runtime según el paso de migración.

Estructura:
    base.py: Clase abstracta BaseMigrator (ciclo común de migración)
    decoding.py: Decodificación tipada de documentos Mongo
    charge_types.py: Clasificación de cargos por documento vinculado
    services.py, organizations.py, packages.py, bought_packages.py,
    charges.py, payments.py, payme_transactions.py,
    organization_balance_bindings.py, credit_updates.py,
    bank_payment_auto_apply_errors.py: Un migrador por paso

Los migradores son instanciados por load_migrator_for_step() en
orchestrator.py usando importlib.import_module() para carga dinámica.

Interfaz requerida (ver BaseMigrator):
    - decode(doc)
    - get_primary_key(record)
    - extract_data(record)
"""
