"""
The setup workflow.

Steps run strictly in order and the first error aborts the run:

    resolve version -> install -> activate -> add GOPATH/bin
        -> apply environment -> restore cache -> verify go

When no version is requested the install and activation steps are
skipped and the run works against whatever go is preinstalled.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from gosetup.config.options import SetupOptions
from gosetup.core.environment import EnvironmentMutation
from gosetup.core.host import HostEnvironment
from gosetup.core.interfaces import CacheTrigger, CommandRunner, ToolchainInstaller
from gosetup.core.platform import detect_platform
from gosetup.toolchain.activation import activate, add_bin_to_path
from gosetup.toolchain.resolver import VersionSpec, resolve_version_input
from gosetup.toolchain.verifier import verify_go

logger = logging.getLogger(__name__)

PACKAGE_MANAGER = "default"
MATCHERS_PATH = Path(__file__).parent / "matchers.json"


@dataclass(frozen=True)
class CacheRequest:
    """Arguments handed to the cache trigger."""

    version_spec: str
    package_manager: str = PACKAGE_MANAGER
    dependency_path: Optional[str] = None


@dataclass
class SetupResult:
    """What a setup run did."""

    version_spec: Optional[VersionSpec] = None
    install_dir: Optional[Path] = None
    go_version: Optional[str] = None
    go_env: Optional[str] = None
    mutation: EnvironmentMutation = field(default_factory=EnvironmentMutation)
    cache_hit: Optional[bool] = None


def run_setup(
    options: SetupOptions,
    installer: ToolchainInstaller,
    cache_trigger: CacheTrigger,
    runner: CommandRunner,
    host: HostEnvironment,
) -> SetupResult:
    """
    Provision and activate Go as described by ``options``.

    Args:
        options: Run options
        installer: Fetches and unpacks releases
        cache_trigger: Restores the dependency cache
        runner: Runs go
        host: Receives environment changes and outputs

    Returns:
        SetupResult describing the run

    Raises:
        GoSetupError: On the first failing step
    """
    result = SetupResult()
    spec = resolve_version_input(options.version, options.version_file)
    result.version_spec = spec
    logger.info(f"Setup go version spec {spec or ''}")

    if spec:
        arch = options.architecture or detect_platform().arch
        auth = options.auth
        manifest = installer.fetch_manifest(auth)
        install_dir = installer.install(
            spec.value, options.check_latest, auth, arch, manifest
        )
        result.install_dir = install_dir
        logger.info(f"Go installed to {install_dir}")

        result.mutation.merge(activate(install_dir, installer.normalize(spec.value)))
        added = add_bin_to_path(runner, result.mutation, host.environ)
        logger.debug(f"add bin {added}")
        logger.info(f"Successfully set up Go version {spec}")

    host.apply(result.mutation)

    if options.cache and cache_trigger.is_cache_feature_available():
        request = CacheRequest(
            version_spec=spec.value if spec else "",
            dependency_path=options.cache_dependency_path,
        )
        result.cache_hit = cache_trigger.restore(
            request.version_spec, request.package_manager, request.dependency_path
        )

    host.add_matcher(MATCHERS_PATH)

    if spec:
        go_version, go_env = verify_go(runner, host.environ)
        result.go_version = go_version
        result.go_env = go_env
        host.set_output("go-version", go_version)

        with host.group("go env"):
            logger.info(go_env.rstrip())

    return result


__all__ = ["CacheRequest", "SetupResult", "run_setup", "PACKAGE_MANAGER", "MATCHERS_PATH"]
