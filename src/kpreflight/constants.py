"""
Shared constants across kpreflight modules.

This module is the single source of truth for:
- Node property names used by filters and conditionals
- Collected file keys
- Result presentation defaults
"""

# =============================================================================
# NODE PROPERTIES
# =============================================================================
# Property names accepted by conditionals and threshold filters

PROP_CPU_CAPACITY = "cpuCapacity"
PROP_CPU_ALLOCATABLE = "cpuAllocatable"
PROP_MEMORY_CAPACITY = "memoryCapacity"
PROP_MEMORY_ALLOCATABLE = "memoryAllocatable"
PROP_POD_CAPACITY = "podCapacity"
PROP_POD_ALLOCATABLE = "podAllocatable"
PROP_EPHEMERAL_STORAGE_CAPACITY = "ephemeralStorageCapacity"
PROP_EPHEMERAL_STORAGE_ALLOCATABLE = "ephemeralStorageAllocatable"

# Filter clauses are checked in this order
NODE_PROPERTIES = (
    PROP_CPU_CAPACITY,
    PROP_CPU_ALLOCATABLE,
    PROP_MEMORY_CAPACITY,
    PROP_MEMORY_ALLOCATABLE,
    PROP_POD_CAPACITY,
    PROP_POD_ALLOCATABLE,
    PROP_EPHEMERAL_STORAGE_CAPACITY,
    PROP_EPHEMERAL_STORAGE_ALLOCATABLE,
)


# =============================================================================
# NODE STATUS RESOURCE KEYS
# =============================================================================
# Keys under status.capacity / status.allocatable in a node object

RESOURCE_CPU = "cpu"
RESOURCE_MEMORY = "memory"
RESOURCE_PODS = "pods"
RESOURCE_EPHEMERAL_STORAGE = "ephemeral-storage"

# property -> (status section, resource key)
PROPERTY_SOURCES = {
    PROP_CPU_CAPACITY: ("capacity", RESOURCE_CPU),
    PROP_CPU_ALLOCATABLE: ("allocatable", RESOURCE_CPU),
    PROP_MEMORY_CAPACITY: ("capacity", RESOURCE_MEMORY),
    PROP_MEMORY_ALLOCATABLE: ("allocatable", RESOURCE_MEMORY),
    PROP_POD_CAPACITY: ("capacity", RESOURCE_PODS),
    PROP_POD_ALLOCATABLE: ("allocatable", RESOURCE_PODS),
    PROP_EPHEMERAL_STORAGE_CAPACITY: ("capacity", RESOURCE_EPHEMERAL_STORAGE),
    PROP_EPHEMERAL_STORAGE_ALLOCATABLE: ("allocatable", RESOURCE_EPHEMERAL_STORAGE),
}


# =============================================================================
# COLLECTED FILE KEYS
# =============================================================================

NODES_KEY = "cluster-resources/nodes.json"
DEPLOYMENTS_DIR = "cluster-resources/deployments"


# =============================================================================
# RESULT PRESENTATION
# =============================================================================

DEFAULT_NODE_RESOURCES_TITLE = "Node Resources"
NODE_RESOURCES_ICON_KEY = "kubernetes_node_resources"
NODE_RESOURCES_ICON_URI = "https://troubleshoot.sh/images/analyzer-icons/node-resources.svg?w=16&h=18"

ANALYZER_FAILED_TITLE = "Analyzer Failed"
SKIPPED_TITLE_PREFIX = "Skipped: "
