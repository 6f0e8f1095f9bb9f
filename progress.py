"""
Contadores de progreso/auditoría por tabla destino.

Sirven para que el operador confirme a ojo que la migración hizo lo
esperado (mongo vs. before/after). No participan en ninguna decisión:
la idempotencia la garantiza el chequeo por PK, no estos números.

Formato de salida:
    [charges] mongo=1200 before=0
    [charges] moved=1200 skipped=0 after=1200
"""

from dataclasses import dataclass, field


@dataclass
class TableCounter:
    table: str
    before: int = 0
    moved: int = 0
    skipped: int = 0
    after: int = 0


@dataclass
class StepReport:
    """Contadores de un paso: tabla principal + tablas hijas."""

    step_name: str
    collection: str
    source_count: int = 0
    tables: dict = field(default_factory=dict)

    def counter(self, table):
        if table not in self.tables:
            self.tables[table] = TableCounter(table)
        return self.tables[table]

    def snapshot_before(self, destination, tables):
        for table in tables:
            self.counter(table).before = destination.count(table)

    def snapshot_after(self, destination):
        for counter in self.tables.values():
            counter.after = destination.count(counter.table)

    def print_start(self):
        for i, counter in enumerate(self.tables.values()):
            if i == 0:
                print(
                    f"   📊 [{counter.table}] mongo={self.source_count:,} "
                    f"before={counter.before:,}"
                )
            else:
                print(f"   📊 [{counter.table}] before={counter.before:,}")

    def print_summary(self):
        for i, counter in enumerate(self.tables.values()):
            if i == 0:
                print(
                    f"   ✅ [{counter.table}] moved={counter.moved:,} "
                    f"skipped={counter.skipped:,} after={counter.after:,}"
                )
            else:
                print(
                    f"   ✅ [{counter.table}] moved={counter.moved:,} "
                    f"after={counter.after:,}"
                )
