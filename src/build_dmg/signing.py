"""Code signing identity discovery.

Identities are listed with ``security find-identity``, whose output looks like:

      1) 3A7F...C2 "Developer ID Application: Jane Doe (ABCDE12345)"
      2) 91B0...4E "Mac Developer: Jane Doe (XYZ9876543)"
         2 valid identities found
"""

import os
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass

from build_dmg.utils.process import Command, CommandRunner, OutputCallback

DEVELOPER_ID_APPLICATION = "Developer ID Application"
MAC_DEVELOPER = "Mac Developer"

IDENTITY_LINE = re.compile(r'^\s*\d+\)\s+([0-9A-Fa-f]{40})\s+"(.+)"\s*$')

# Set by CI services for pull request builds
PULL_REQUEST_VARS = (
    "TRAVIS_PULL_REQUEST",
    "CIRCLE_PULL_REQUEST",
    "BITRISE_PULL_REQUEST",
    "APPVEYOR_PULL_REQUEST_NUMBER",
    "GITHUB_BASE_REF",
)


@dataclass(frozen=True)
class Identity:
    """Code signing identity from the keychain."""

    hash: str
    name: str


def is_pull_request(env: Mapping[str, str]) -> bool:
    """Whether this is a CI build of an untrusted pull request."""
    travis = env.get("TRAVIS_PULL_REQUEST")
    if travis and travis != "false":
        return True
    return any(env.get(name) for name in PULL_REQUEST_VARS[1:])


def is_sign_allowed(env: Mapping[str, str] | None = None, platform: str | None = None) -> bool:
    """Signing needs macOS and is refused for pull requests unless CSC_FOR_PULL_REQUEST=true."""
    if env is None:
        env = os.environ
    if (platform or sys.platform) != "darwin":
        return False
    if is_pull_request(env):
        return env.get("CSC_FOR_PULL_REQUEST", "").lower() == "true"
    return True


def parse_identities(output: str) -> list[Identity]:
    """Parse ``security find-identity`` output."""
    identities: list[Identity] = []
    for line in output.splitlines():
        match = IDENTITY_LINE.match(line)
        if match:
            identities.append(Identity(hash=match.group(1).upper(), name=match.group(2)))
    return identities


def _matches(identity: Identity, certificate_type: str, qualifier: str | None) -> bool:
    if not identity.name.startswith(certificate_type):
        return False
    if qualifier is None:
        return True
    return qualifier in identity.name or identity.hash == qualifier.upper()


async def find_identity(
    certificate_type: str,
    qualifier: str | None,
    keychain_file: str | None,
    runner: CommandRunner,
    on_output: OutputCallback | None = None,
) -> Identity | None:
    """Find the first valid identity of a certificate type matching the qualifier.

    A failing ``security`` invocation counts as "no identity found"; the
    failure is reported through ``on_output``.
    """
    args = ["find-identity", "-v", "-p", "codesigning"]
    if keychain_file is not None:
        args.append(keychain_file)

    try:
        exit_code, output = await runner.capture(Command("security", tuple(args)))
    except FileNotFoundError as e:
        if on_output:
            await on_output(f"Identity lookup failed: {e}\n")
        return None
    if exit_code != 0:
        if on_output:
            await on_output(f"Identity lookup failed: security exited with {exit_code}\n")
        return None

    for identity in parse_identities(output):
        if _matches(identity, certificate_type, qualifier):
            return identity
    return None
