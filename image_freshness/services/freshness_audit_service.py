import json
import logging
from typing_extensions import override

from image_freshness.clients.kubernetes_client import KubernetesClient
from image_freshness.clients.registry_cache import RegistryClientCache
from image_freshness.models import AuditSettings, EvaluationReport, WorkloadUsage
from image_freshness.repositories import InventoryRepository
from image_freshness.services.freshness_evaluator import FreshnessEvaluator
from image_freshness.services.service import Service
from image_freshness.utils.logging import setup_logger


class FreshnessAuditService(Service):
    def __init__(self, settings: AuditSettings):
        self.settings: AuditSettings = settings
        self.cache: RegistryClientCache = RegistryClientCache(timeout=settings.timeout)
        self.evaluator: FreshnessEvaluator = FreshnessEvaluator(self.cache, max_workers=settings.max_workers)
        self.logger: logging.Logger = setup_logger("FreshnessAuditService")

    @override
    def run(self) -> EvaluationReport:
        usage = self.load_inventory()
        self.logger.info(f"Evaluating {len(usage)} distinct images")

        report = self.evaluator.evaluate(usage)

        if self.settings.json_output:
            print(json.dumps(report.to_dict(), indent=2))
        else:
            self.log_report(report)
        return report

    def load_inventory(self) -> WorkloadUsage:
        if self.settings.inventory_file:
            self.logger.info(f"Reading inventory from {self.settings.inventory_file}")
            return InventoryRepository(self.settings.inventory_file).find_all()
        return KubernetesClient(self.settings.kubeconfig).list_image_usage()

    def log_report(self, report: EvaluationReport) -> None:
        for skip in report.skipped:
            self.logger.warning(f"Skipped {skip.image} ({skip.reason.value}): {skip.detail}")

        for result in report.results:
            self.logger.info(f"Image: {result.reference}")
            for tag in result.newer:
                self.logger.info(f"** Newer tag found: {tag.tag} ({tag})")
            for workload in result.workloads:
                self.logger.info(f"Used by: {workload}")

        self.logger.info(
            f"{len(report.outdated)} of {len(report.results)} evaluated images have newer tags, "
            f"{len(report.skipped)} skipped"
        )
