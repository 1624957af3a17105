import logging
from concurrent.futures import ThreadPoolExecutor

from image_freshness.clients.registry_cache import RegistryClientCache
from image_freshness.errors import (
    ImageReferenceError,
    RegistryConnectionError,
    TagCoercionError,
    TagListingError,
)
from image_freshness.models import (
    EvaluationReport,
    FreshnessResult,
    SkippedImage,
    SkipReason,
    TagVersion,
    WorkloadRef,
    WorkloadUsage,
    coerce_tag,
    parse_image_reference,
)
from image_freshness.utils.logging import setup_logger

DEFAULT_MAX_WORKERS = 8


class FreshnessEvaluator:
    def __init__(self, cache: RegistryClientCache, max_workers: int = DEFAULT_MAX_WORKERS):
        self.cache: RegistryClientCache = cache
        self.max_workers: int = max_workers
        self.logger: logging.Logger = setup_logger("FreshnessEvaluator")

    def evaluate(self, usage: WorkloadUsage) -> EvaluationReport:
        results: list[FreshnessResult] = []
        skipped: list[SkippedImage] = []

        images = sorted(usage)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {image: executor.submit(self.evaluate_image, image, usage[image]) for image in images}
            for image, future in futures.items():
                try:
                    outcome = future.result()
                except Exception as e:
                    self.logger.error(f"Unexpected error evaluating {image}: {e}")
                    outcome = SkippedImage(image, SkipReason.LISTING_FAILURE, str(e), usage[image])

                if isinstance(outcome, SkippedImage):
                    skipped.append(outcome)
                else:
                    results.append(outcome)

        return EvaluationReport(results=results, skipped=skipped)

    def evaluate_image(self, image: str, workloads: list[WorkloadRef]) -> FreshnessResult | SkippedImage:
        try:
            reference = parse_image_reference(image)
        except ImageReferenceError as e:
            return SkippedImage(image, SkipReason.UNPARSABLE, e.reason, workloads)

        if reference.is_pinned:
            return SkippedImage(image, SkipReason.DIGEST_PINNED, f"pinned to {reference.digest}", workloads)

        try:
            deployed = coerce_tag(reference.tag)
        except TagCoercionError as e:
            return SkippedImage(image, SkipReason.NON_SEMVER, str(e), workloads)

        try:
            client = self.cache.get(reference.registry_host)
        except RegistryConnectionError as e:
            return SkippedImage(image, SkipReason.CONNECTION_FAILURE, str(e), workloads)

        try:
            tags = client.list_tags(reference.repository_path)
        except TagListingError as e:
            return SkippedImage(image, SkipReason.LISTING_FAILURE, str(e), workloads)

        return FreshnessResult(
            image=image,
            reference=reference,
            deployed=deployed,
            newer=self.newer_tags(deployed, tags),
            workloads=list(workloads),
        )

    def newer_tags(self, deployed: TagVersion, tags: list[str]) -> list[TagVersion]:
        newer: list[TagVersion] = []
        for tag in tags:
            try:
                candidate = coerce_tag(tag)
            except TagCoercionError as e:
                self.logger.debug(f"Skipping non-semver {tag!r}: {e}")
                continue
            if candidate.version > deployed.version:
                newer.append(candidate)
        return newer
