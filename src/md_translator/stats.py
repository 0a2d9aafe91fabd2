"""
Compteurs partagés par les workers et rapport final.
"""

import threading
from dataclasses import dataclass
from enum import Enum


class Outcome(Enum):
    """Issue terminale d'une tâche. Chaque tâche en a exactement une."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"
    DRY_RUN = "dry_run_hits"


@dataclass(frozen=True)
class RunStats:
    """
    Statistiques figées d'une exécution, lues après l'arrêt des workers.

    Attributes:
        total: Nombre de fichiers découverts
        processed: Traduits et écrits
        skipped: Ignorés car la cible existait (sans overwrite)
        failed: En échec (lecture, backend, extraction, écriture...)
        dry_run_hits: Simulés en mode dry-run
    """

    total: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run_hits: int = 0

    @property
    def accounted(self) -> int:
        """Nombre de tâches arrivées à une issue terminale."""
        return self.processed + self.skipped + self.failed + self.dry_run_hits


class StatsAggregator:
    """
    Compteurs thread-safe mis à jour par les workers.

    Les workers n'ont accès qu'à ``increment()`` ; aucun compteur n'est
    jamais décrémenté. ``total`` est fixé à la construction.

    Example:
        >>> stats = StatsAggregator(total=3)
        >>> stats.increment(Outcome.PROCESSED)
        >>> stats.snapshot().processed
        1
    """

    def __init__(self, total: int):
        self._lock = threading.Lock()
        self._total = total
        self._counts: dict[Outcome, int] = {outcome: 0 for outcome in Outcome}

    @property
    def total(self) -> int:
        return self._total

    def increment(self, outcome: Outcome) -> None:
        with self._lock:
            self._counts[outcome] += 1

    def snapshot(self) -> RunStats:
        """Copie figée des compteurs."""
        with self._lock:
            return RunStats(
                total=self._total,
                processed=self._counts[Outcome.PROCESSED],
                skipped=self._counts[Outcome.SKIPPED],
                failed=self._counts[Outcome.FAILED],
                dry_run_hits=self._counts[Outcome.DRY_RUN],
            )

    def __repr__(self) -> str:
        s = self.snapshot()
        return (
            f"StatsAggregator(total={s.total}, processed={s.processed}, "
            f"skipped={s.skipped}, failed={s.failed}, dry_run={s.dry_run_hits})"
        )


@dataclass(frozen=True)
class RunReport:
    """
    Rapport final d'une exécution.

    Attributes:
        stats: Compteurs figés
        elapsed: Durée totale en secondes
        dry_run: L'exécution était une simulation
    """

    stats: RunStats
    elapsed: float
    dry_run: bool = False

    @property
    def exit_code(self) -> int:
        """1 si au moins un fichier a échoué, 0 sinon (dry-run compris)."""
        return 1 if self.stats.failed > 0 else 0

    def format_summary(self) -> str:
        s = self.stats
        lines = [
            "",
            "=" * 60,
            "📊 Résumé de la traduction",
            "=" * 60,
            f"   📁 Fichiers découverts:       {s.total}",
        ]
        if self.dry_run:
            lines.append(f"   🧪 Simulés (dry-run):          {s.dry_run_hits}")
        else:
            lines.append(f"   ✅ Traduits:                   {s.processed}")
            lines.append(f"   ⏭️  Ignorés (déjà présents):   {s.skipped}")
        lines.append(f"   ❌ Échecs:                     {s.failed}")
        lines.append(f"   ⏱️  Durée totale:              {self.elapsed:.2f}s")
        if s.failed > 0:
            lines.append("   📁 Consultez les logs dans 'logs/' pour plus de détails")
        lines.append("=" * 60)
        return "\n".join(lines)
