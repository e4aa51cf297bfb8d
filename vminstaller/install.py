#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import argparse
import os
import shutil
import sys
import tempfile
import time

from typing import Optional

from vminstaller.vm_constants import (
    PACKAGE_FEED_URL,
    VMINSTALLER_VERSION,
    PresentationMode,
)
from vminstaller.vm_common import (
    DialogInit,
    DialogAvailable,
    UserInterfaceMode,
)

from vminstaller.installer.args.basic_args import add_basic_args
from vminstaller.installer.args.environment_args import add_environment_args
from vminstaller.installer.args.presentation_args import add_presentation_args

from vminstaller.installer.configs.constants.enums import InstallerResult, ControlFlow

from vminstaller.installer.core.catalog import CatalogResolution, PackageIndexCache, resolve
from vminstaller.installer.core.config_document import ConfigDocument, apply_customization
from vminstaller.installer.core.config_store import fetch_to_path, load_document, persist_document
from vminstaller.installer.core.customization import CustomizationSession, tracked_env_defaults
from vminstaller.installer.core.install_plan import InstallPaths, InstallPlan
from vminstaller.installer.core.policy import InstallerSettings, load_settings
from vminstaller.installer.core.validation import (
    apply_post_validation_actions,
    run_preflight,
    validate,
)

from vminstaller.installer.platforms import get_platform_installer

from vminstaller.installer.ui.dui.dui_installer_ui import DialogInstallerUI
from vminstaller.installer.ui.tui.tui_installer_ui import TUIInstallerUI

from vminstaller.installer.utils.exceptions import (
    ConfigDocumentError,
    ConfigurationMissingError,
    EngineError,
    FetchError,
    PolicyFileError,
)
from vminstaller.installer.utils.logger_utils import InstallerLogger, SkipReasons
from vminstaller.installer.utils.summary_utils import build_completion_message


###################################################################################################
ORIG_PATH = os.getcwd()


def build_arg_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments specific to the installer itself"""
    add_basic_args(parser)
    add_presentation_args(parser)
    add_environment_args(parser)


def create_ui_implementation(presentation_mode: PresentationMode, ui_mode_flag: UserInterfaceMode):
    """Create the appropriate UI implementation based on interface mode.

    Args:
        presentation_mode: tui/dui/gui/silent
        ui_mode_flag: User interface mode flag (dialog or input)

    Returns:
        Appropriate UI implementation instance (None when running silently)
    """

    if presentation_mode == PresentationMode.MODE_TUI:
        return TUIInstallerUI(ui_mode_flag)
    elif presentation_mode == PresentationMode.MODE_DUI:
        return DialogInstallerUI(UserInterfaceMode.InteractionDialog)
    elif presentation_mode == PresentationMode.MODE_GUI:
        # customtkinter needs a display; only import it when asked for
        from vminstaller.installer.ui.gui.gui_installer_ui import GUIInstallerUI

        return GUIInstallerUI(UserInterfaceMode.InteractionInput)
    elif presentation_mode == PresentationMode.MODE_SILENT:
        return None
    else:
        raise ValueError(f"Unsupported interface mode: {presentation_mode}")


def determine_presentation_mode(parsed_args: argparse.Namespace) -> PresentationMode:
    """Determine which interface mode to use based on args and environment."""

    def check_for_python_dialog():
        DialogInit()
        return PresentationMode.MODE_DUI if DialogAvailable() else None

    if parsed_args.non_interactive:
        return PresentationMode.MODE_SILENT
    if parsed_args.tui:
        return PresentationMode.MODE_TUI
    if parsed_args.gui:
        return PresentationMode.MODE_GUI
    if parsed_args.dui:
        if dui_mode := check_for_python_dialog():
            return dui_mode
        InstallerLogger.warning("python dialog is not available, falling back to the text interface")

    return PresentationMode.MODE_TUI


def determine_control_flow(parsed_args: argparse.Namespace) -> ControlFlow:
    if parsed_args.dryRun:
        return ControlFlow.DRYRUN
    elif parsed_args.configOnly:
        return ControlFlow.CONFIG
    return ControlFlow.INSTALL


def configure_logging(parsed_args: argparse.Namespace, presentation_mode: PresentationMode) -> None:
    if parsed_args.quiet:
        InstallerLogger.set_console_output(False)

    if parsed_args.debug:
        InstallerLogger.set_debug_enabled(True)

    # buffer logs when using terminal UIs and not logging to file
    if presentation_mode in (
        PresentationMode.MODE_DUI,
        PresentationMode.MODE_TUI,
    ) and (parsed_args.logToFile is None):
        InstallerLogger.set_buffered_console(True)

    if parsed_args.logToFile is not None:
        if parsed_args.logToFile == "":
            log_filename = InstallerLogger.generate_timestamped_filename()
            InstallerLogger.info(f"No log filename specified, using: {log_filename}")
        else:
            log_filename = parsed_args.logToFile

        InstallerLogger.set_log_file(log_filename)
        InstallerLogger.info(f"Logging to file: {log_filename}")


###################################################################################################
def run_validation(platform_installer, settings: InstallerSettings, ui_impl, parsed_args) -> bool:
    """Gate entry on the preflight checks (or log that they were bypassed)."""
    if parsed_args.skipValidation:
        InstallerLogger.start("Preflight checks")
        InstallerLogger.end("Preflight checks", InstallerResult.SKIPPED, SkipReasons.VALIDATION_BYPASSED)
        return True
    results = validate(platform_installer.host_facts(), settings.preflight)
    return run_preflight(results, ui_impl, non_interactive=parsed_args.non_interactive)


def obtain_document(parsed_args, paths: InstallPaths, ui_impl, control_flow: ControlFlow) -> ConfigDocument:
    """Load the base configuration document and fetch the optional layout file."""
    if control_flow.should_write_files():
        os.makedirs(paths.working_dir, exist_ok=True)
        doc = load_document(
            parsed_args.configSource,
            paths.config_path,
            ui=ui_impl,
            non_interactive=parsed_args.non_interactive,
            debug=parsed_args.debug,
        )
        if parsed_args.layoutSource:
            fetch_to_path(parsed_args.layoutSource, paths.layout_path, debug=parsed_args.debug)
        return doc

    # dry run: work on a scratch copy so the working directory is left untouched
    with tempfile.TemporaryDirectory(prefix="vminstaller-") as scratch_dir:
        scratch_path = os.path.join(scratch_dir, os.path.basename(paths.config_path))
        if os.path.isfile(paths.config_path):
            shutil.copyfile(paths.config_path, scratch_path)
        doc = load_document(
            parsed_args.configSource,
            scratch_path,
            ui=ui_impl,
            non_interactive=True,
            debug=parsed_args.debug,
        )
    if parsed_args.layoutSource:
        InstallerLogger.info(control_flow.would(f"copy layout file {parsed_args.layoutSource} to {paths.layout_path}"))
    return doc


def resolve_catalog(
    platform_installer,
    settings: InstallerSettings,
    doc: ConfigDocument,
    paths: InstallPaths,
    refresh: bool = False,
) -> CatalogResolution:
    """Derive the to-install and available sets; engine queries that fail leave their set empty."""
    engine = platform_installer.engine
    feed_url = settings.package_sources[0][1] if settings.package_sources else PACKAGE_FEED_URL

    try:
        installed = engine.query_installed()
    except EngineError as e:
        InstallerLogger.warning(f"Unable to list installed packages, assuming none: {e}")
        installed = set()

    try:
        full_index = PackageIndexCache(paths.index_cache_path).get(
            lambda: engine.query_index(feed_url),
            refresh=refresh,
            control_flow=platform_installer.control_flow,
        )
    except EngineError as e:
        InstallerLogger.warning(f"Unable to query the package index, no additional packages will be offered: {e}")
        full_index = []

    resolution = resolve(doc, installed, full_index, excluded=settings.excluded_packages)
    InstallerLogger.info(
        f"{len(resolution.to_install)} package(s) to install, {len(resolution.available)} more available"
    )
    return resolution


def customize(doc: ConfigDocument, resolution: CatalogResolution, ui_impl, parsed_args) -> Optional[ConfigDocument]:
    """Negotiate the final document with the operator; None when customization was cancelled.

    Without a session the loaded document is final as it stands.
    """
    InstallerLogger.start("Customization")
    if parsed_args.skipCustomization or parsed_args.non_interactive or ui_impl is None:
        InstallerLogger.end("Customization", InstallerResult.SKIPPED, SkipReasons.CUSTOMIZATION_BYPASSED)
        return doc

    session = CustomizationSession.from_resolution(resolution, tracked_env_defaults(doc))
    InstallerLogger.flush_buffer_to_console()
    result = ui_impl.negotiate(session)
    if result is None:
        InstallerLogger.end("Customization", InstallerResult.FAILURE, "cancelled by user")
        return None
    InstallerLogger.end("Customization", InstallerResult.SUCCESS, f"{len(result.selected)} package(s) selected")
    return apply_customization(doc, result)


def build_plan(parsed_args, settings: InstallerSettings, username: str, ui_impl, control_flow: ControlFlow) -> Optional[InstallPlan]:
    """Build the install plan, prompting for the auto-logon password when one is needed."""
    allow_password = not parsed_args.noPassword
    secret = parsed_args.password
    if allow_password and (secret is None) and control_flow.should_run_install_steps():
        if parsed_args.non_interactive or ui_impl is None:
            InstallerLogger.warning("No --password given; automatic log on after reboots is disabled")
        else:
            secret = ui_impl.ask_credential_secret(username)
            if secret is None:
                return None
    return InstallPlan.build(
        settings.bootstrap_package,
        username,
        secret,
        allow_reboot=not parsed_args.noReboots,
        allow_password=allow_password,
    )


def countdown(seconds: int) -> None:
    for remaining in range(seconds, 0, -1):
        print(f"\rInstallation starts in {remaining:2d} second(s), press Ctrl+C to abort ", end="", flush=True)
        time.sleep(1)
    print()


###################################################################################################
def run(parsed_args: argparse.Namespace, platform_installer=None, ui_impl=None, presentation_mode=None) -> int:
    """Run the installer flow and return the process exit code (0 = handed off, 1 = aborted)."""
    control_flow = determine_control_flow(parsed_args)

    if presentation_mode is None:
        presentation_mode = determine_presentation_mode(parsed_args)
    configure_logging(parsed_args, presentation_mode)

    InstallerLogger.start("INSTALLER")
    InstallerLogger.info(f"VM installer {VMINSTALLER_VERSION} ({control_flow.name})")
    InstallerLogger.debug(f"Arguments: {sys.argv[1:]}")

    try:
        settings = load_settings(parsed_args.policyFile)
    except PolicyFileError as e:
        InstallerLogger.error(f"Failed to load policy file: {e}")
        return 1

    if ui_impl is None and presentation_mode != PresentationMode.MODE_SILENT:
        try:
            InstallerLogger.start("Initializing User Interface")
            ui_mode_flag = (
                UserInterfaceMode.InteractionDialog
                if presentation_mode == PresentationMode.MODE_DUI
                else UserInterfaceMode.InteractionInput
            )
            ui_impl = create_ui_implementation(presentation_mode, ui_mode_flag)
            InstallerLogger.end("Initializing User Interface", InstallerResult.SUCCESS, f"Using {presentation_mode.name}")
        except Exception as e:
            InstallerLogger.error(f"Failed to create UI implementation: {e}")
            return 1

    if platform_installer is None:
        try:
            InstallerLogger.start("Spawning Platform-specific Installer")
            platform_installer = get_platform_installer(ui_impl, parsed_args.debug, control_flow, settings)
            InstallerLogger.end("Spawning Platform-specific Installer", InstallerResult.SUCCESS)
        except NotImplementedError as e:
            InstallerLogger.error(str(e))
            return 1

    # 1) preflight gate
    if not run_validation(platform_installer, settings, ui_impl, parsed_args):
        InstallerLogger.end("INSTALLER", InstallerResult.FAILURE, "Preflight checks did not pass")
        return 1
    username = platform_installer.host_facts().username()
    apply_post_validation_actions(platform_installer, username)

    # 2) base configuration document
    paths = InstallPaths.in_directory(
        os.path.abspath(parsed_args.workingDir or ORIG_PATH),
        with_layout=bool(parsed_args.layoutSource),
    )
    try:
        InstallerLogger.start("Configuration document")
        doc = obtain_document(parsed_args, paths, ui_impl, control_flow)
        InstallerLogger.end("Configuration document", InstallerResult.SUCCESS, f"{len(doc.packages)} package(s)")
    except (ConfigurationMissingError, ConfigDocumentError, FetchError) as e:
        InstallerLogger.end("Configuration document", InstallerResult.FAILURE, str(e))
        return 1

    # 3) catalog and 4) customization
    resolution = resolve_catalog(platform_installer, settings, doc, paths, refresh=parsed_args.refreshCatalog)
    final_doc = customize(doc, resolution, ui_impl, parsed_args)
    if final_doc is None:
        InstallerLogger.end("INSTALLER", InstallerResult.FAILURE, "Customization cancelled; nothing was saved")
        return 1

    # 5) credential and confirmation
    plan = build_plan(parsed_args, settings, username, ui_impl, control_flow)
    if plan is None:
        InstallerLogger.end("INSTALLER", InstallerResult.FAILURE, "Password entry cancelled")
        return 1

    if (ui_impl is not None) and (not parsed_args.non_interactive):
        InstallerLogger.flush_buffer_to_console()
        if not ui_impl.show_final_configuration_summary(final_doc, plan, paths, control_flow):
            InstallerLogger.end("INSTALLER", InstallerResult.SKIPPED, "Installation cancelled by user at confirmation.")
            return 1

    # 6) persist the working copy, then hand off
    try:
        persist_document(final_doc, [paths.config_path], control_flow)
    except ConfigDocumentError as e:
        InstallerLogger.error(f"Failed to write configuration document: {e}")
        return 1

    if control_flow.should_run_install_steps() and not parsed_args.skipWait:
        countdown(settings.start_countdown_sec)

    if control_flow.is_dry_run():
        InstallerLogger.info("Dry run: executing no-op pass over installation steps for reporting only")

    install_ok = platform_installer.run_installation(final_doc, plan, paths)

    if control_flow.is_dry_run():
        InstallerLogger.end("INSTALLER", InstallerResult.SKIPPED, "Dry run successful: skipped actual installation")
    elif control_flow.is_config_only():
        InstallerLogger.end("INSTALLER", InstallerResult.SKIPPED, "Configuration-only: installation steps skipped")
    elif install_ok:
        InstallerLogger.end("INSTALLER", InstallerResult.SUCCESS, "Installation handed off to Boxstarter")
    else:
        InstallerLogger.end("INSTALLER", InstallerResult.FAILURE, "Installation failed")
        return 1

    InstallerLogger.flush_buffer_to_console()
    completion = build_completion_message(final_doc, handed_off=control_flow.should_run_install_steps())
    if ui_impl is not None:
        ui_impl.display_message(completion)
    else:
        InstallerLogger.info(completion)
    return 0


def main():
    try:
        parser = argparse.ArgumentParser(description="Analysis VM Installer", conflict_handler="resolve")
        build_arg_parser(parser)
        parsed_args = parser.parse_args()
    except Exception as e:
        InstallerLogger.error(f"Failed to build installer specific argument parser: {e}")
        sys.exit(1)

    try:
        exit_code = run(parsed_args)
    except KeyboardInterrupt:
        InstallerLogger.error("Installation cancelled by user.")
        exit_code = 1
    except Exception as e:
        import traceback

        tb = traceback.format_exc()
        # Include traceback in error log so failures are actionable without --debug
        InstallerLogger.error(f"Error executing main(): {e}\n{tb}")
        exit_code = 1
    finally:
        # final safety flush for terminal UIs so buffered logs are emitted even on early returns
        InstallerLogger.flush_buffer_to_console()
        InstallerLogger.set_buffered_console(False)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
