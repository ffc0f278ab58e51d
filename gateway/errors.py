"""
Gateway error taxonomy.

Every error is scoped to a single request. Core modules raise these and the
API layer maps ``status_code`` onto the HTTP response.
"""


class GatewayError(Exception):
    """Base class for all request-scoped gateway failures."""
    status_code = 500


class DeviceNotFound(GatewayError):
    status_code = 404

    def __init__(self, node_id: int, endpoint_id=None):
        self.node_id = node_id
        self.endpoint_id = endpoint_id
        if endpoint_id is None:
            super().__init__(f"Device with node id '{node_id}' not found")
        else:
            super().__init__(f"Device with node id '{node_id}' and endpoint '{endpoint_id}' not found")


class UnsupportedCluster(GatewayError):
    status_code = 400

    def __init__(self, cluster: str, device_name: str):
        self.cluster = cluster
        self.device_name = device_name
        super().__init__(f"Cluster '{cluster}' not supported by device '{device_name}'")


class UnsupportedCommand(GatewayError):
    status_code = 400

    def __init__(self, command: str, cluster: str, device_name: str):
        self.command = command
        self.cluster = cluster
        self.device_name = device_name
        super().__init__(
            f"Command '{command}' not supported by device '{device_name}' in cluster '{cluster}'"
        )


class ExecutionError(GatewayError):
    """chip-tool could not be started (missing binary, permissions, timeout)."""
    status_code = 500


class CommandFailed(GatewayError):
    """chip-tool ran but exited non-zero."""
    status_code = 400

    def __init__(self, message: str, returncode: int, diagnostics: str = ""):
        self.returncode = returncode
        self.diagnostics = diagnostics
        super().__init__(f"{message}: {diagnostics}" if diagnostics else message)


class PersistenceError(GatewayError):
    status_code = 500
