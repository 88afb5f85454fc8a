"""Constants for the Agent Control Plane Operator."""

# Cluster API
CAPI_GROUP = "cluster.x-k8s.io"
CAPI_VERSION = "v1beta1"
CONTROLPLANE_GROUP = f"controlplane.{CAPI_GROUP}"
CONTROLPLANE_VERSION = "v1beta1"

# Hive / assisted installer
HIVE_GROUP = "hive.openshift.io"
HIVE_VERSION = "v1"
HIVE_EXT_GROUP = "extensions.hive.openshift.io"
HIVE_EXT_VERSION = "v1beta1"

# Resource Kinds
KIND_AGENT_CONTROL_PLANE = "AgentControlPlane"
KIND_CLUSTER = "Cluster"
KIND_CLUSTER_DEPLOYMENT = "ClusterDeployment"
KIND_CLUSTER_IMAGE_SET = "ClusterImageSet"
KIND_AGENT_CLUSTER_INSTALL = "AgentClusterInstall"
KIND_SECRET = "Secret"

# Labels
LABEL_CLUSTER_NAME = f"{CAPI_GROUP}/cluster-name"

# Secrets
CLUSTER_SECRET_TYPE = f"{CAPI_GROUP}/secret"
KUBECONFIG_SECRET_SUFFIX = "kubeconfig"
KUBECONFIG_SOURCE_KEY = "kubeconfig"
KUBECONFIG_TARGET_KEY = "value"

# Install
INSTALL_STATE_ADDING_HOSTS = "adding-hosts"
CLUSTER_NETWORK_HOST_PREFIX = 23

# Requeue delay while waiting for Cluster API to set the owner reference
CLUSTER_OWNER_REQUEUE_SECONDS = 10

# Field Manager
FIELD_MANAGER = "agent-controlplane-operator"
CONTROLLER_NAME = "agent-controlplane-operator"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_WAITING_FOR_CLUSTER = "WaitingForCluster"
EVENT_REASON_CLUSTER_INSTALL_CREATED = "ClusterInstallCreated"
EVENT_REASON_KUBECONFIG_BRIDGED = "KubeconfigBridged"
EVENT_REASON_CONTROL_PLANE_READY = "ControlPlaneReady"
