import logging

from kubernetes import client, config

from image_freshness.errors import InventoryError
from image_freshness.models.workload import WorkloadRef, WorkloadUsage

logger = logging.getLogger(__name__)


class KubernetesClient:
    def __init__(self, kubeconfig: str | None = None):
        try:
            self._load_config(kubeconfig)
            self.core: client.CoreV1Api = client.CoreV1Api()
        except Exception as e:
            raise InventoryError(f"Unable to configure Kubernetes client: {e}") from e

    @staticmethod
    def _load_config(kubeconfig: str | None) -> None:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig)
            return
        try:
            config.load_incluster_config()
        except config.ConfigException:
            config.load_kube_config()

    def list_image_usage(self) -> WorkloadUsage:
        try:
            pods = self.core.list_pod_for_all_namespaces().items
        except Exception as e:
            raise InventoryError(f"Unable to list pods: {e}") from e

        usage: WorkloadUsage = {}
        for pod in pods:
            containers = list(pod.spec.init_containers or []) + list(pod.spec.containers or [])
            workload = WorkloadRef(namespace=pod.metadata.namespace, name=pod.metadata.name)
            for image in dict.fromkeys(c.image for c in containers if c.image):
                usage.setdefault(image, []).append(workload)

        logger.info(f"Found {len(usage)} distinct images in {len(pods)} pods")
        return usage
