"""
Command line interface for contract verification on Etherscan-family explorers

Usage:
    contract-verifier verify -n ethereum -a 0x... -s Token.sol -c Token -v v0.8.19+commit.7dd6d404
    contract-verifier verify-deployment deployments/deployment_base_latest.yaml
    contract-verifier encode-args -t uint256,address -V 100,0x...
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from .abi import encode_constructor_args
from .config import load_config
from .errors import InvalidRuns, VerifierError
from .models import OutcomeStatus, VerificationRequest
from .validation import is_valid_address, is_valid_compiler_version, require_compiler_version
from .verifier import ContractVerifier

API_KEY_SITES = [
    ("Etherscan", "https://etherscan.io/apis"),
    ("Polygonscan", "https://polygonscan.com/apis"),
    ("BSCScan", "https://bscscan.com/apis"),
    ("Arbiscan", "https://arbiscan.io/apis"),
    ("Optimism", "https://optimistic.etherscan.io/apis"),
    ("BaseScan", "https://basescan.org/apis"),
]

MAX_VERSIONS_SHOWN = 20


def _print_hint(error: Exception) -> None:
    message = str(error)
    if "API key" in message:
        print("   Make sure to set your API keys in the .env file")
        print("   Run: contract-verifier setup")
    elif "Source file" in message:
        print("   Check that the source file path is correct")
    elif "Network error" in message:
        print("   Check your internet connection and try again")


def _split_csv(value: str):
    return [item.strip() for item in value.split(",")] if value else []


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"cannot be negative: {value}")
    return number


def cmd_verify(verifier: ContractVerifier, args) -> int:
    networks = verifier.supported_networks()
    if args.network not in networks:
        print(f"✗ Unsupported network \"{args.network}\"")
        print(f"   Supported networks: {', '.join(networks)}")
        return 1

    if not is_valid_address(args.address):
        print(f"✗ Invalid contract address \"{args.address}\"")
        print("   Address must be a valid Ethereum address (42 characters starting with 0x)")
        return 1

    if not is_valid_compiler_version(args.compiler_version):
        print(f"✗ Invalid compiler version format \"{args.compiler_version}\"")
        print("   Version must be in format: v0.8.19+commit.e7d8d7db")
        return 1

    source_code = verifier.read_source(args.source)
    network = verifier.network_info(args.network)

    print(f"\n{'=' * 60}")
    print(f"VERIFYING: {args.contract}")
    print(f"{'=' * 60}")
    print(f"Address: {args.address}")
    print(f"Network: {network.name}")
    print(f"Compiler: {args.compiler_version}")
    optimizer = f"Enabled ({args.runs} runs)" if args.optimized else "Disabled"
    print(f"Optimization: {optimizer}")
    print(f"{'=' * 60}\n")

    request = VerificationRequest(
        network=args.network,
        address=args.address,
        source_code=source_code,
        contract_name=args.contract,
        compiler_version=args.compiler_version,
        optimized=args.optimized,
        runs=args.runs,
        evm_version=args.evm_version,
        constructor_args=args.constructor_args,
    )

    outcome = verifier.verify(request, max_attempts=args.max_attempts, interval=args.interval)

    if outcome.success:
        print(f"\n✓ {outcome.message}")
        if outcome.explorer_url:
            print("\nView on explorer:")
            print(f"  {outcome.explorer_url}")
        return 0

    marker = "⚠" if outcome.status is OutcomeStatus.TIMED_OUT else "✗"
    print(f"\n{marker} Verification failed: {outcome.message}")
    print("   Please check your inputs and try again")
    return 1


def _yaml_address(value) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return f"0x{value:040x}"
    return str(value)


def _restore_hex_addresses(contract_info: Dict) -> None:
    """Unquoted 0x... values load as YAML integers; turn them back into address strings"""
    if "address" in contract_info:
        contract_info["address"] = _yaml_address(contract_info["address"])

    encoded_args = contract_info.get("args")
    if isinstance(encoded_args, dict):
        types = encoded_args.get("types") or []
        values = encoded_args.get("values") or []
        if len(types) == len(values):
            encoded_args["values"] = [
                _yaml_address(value) if type_tag == "address" else value
                for type_tag, value in zip(types, values)
            ]


def _deployment_runs(info: Dict) -> int:
    runs = info.get("runs", 200)
    if isinstance(runs, bool) or not isinstance(runs, int) or runs < 1:
        raise InvalidRuns(f"runs must be a positive integer: {runs!r}")
    return runs


def _deployment_request(network: str, name: str, info: Dict, base_dir: Path) -> VerificationRequest:
    constructor_args = info.get("constructor_args") or ""
    if not isinstance(constructor_args, str):
        raise ValueError("constructor_args must be a quoted hex string")
    encoded_args = info.get("args")
    if not constructor_args and isinstance(encoded_args, dict):
        constructor_args = encode_constructor_args(
            list(encoded_args.get("types") or []), list(encoded_args.get("values") or [])
        )

    source_path = Path(info["source"])
    if not source_path.is_absolute():
        source_path = base_dir / source_path

    return VerificationRequest(
        network=network,
        address=str(info["address"]),
        source_code=ContractVerifier.read_source(source_path),
        contract_name=str(info.get("contract_name") or name),
        compiler_version=require_compiler_version(str(info["compiler_version"])),
        optimized=bool(info.get("optimized", False)),
        runs=_deployment_runs(info),
        evm_version=str(info.get("evm_version") or "default"),
        constructor_args=constructor_args,
    )


def verify_from_deployment(verifier: ContractVerifier, deployment_file: Path) -> Dict[str, Dict]:
    """Verify all contracts from a deployment log and record the results in it"""
    print(f"\nLoading deployment from: {deployment_file}")

    with open(deployment_file, "r") as f:
        deployment = yaml.safe_load(f) or {}

    info = deployment.get("deployment_info") or {}
    network = info.get("network") or info.get("chain")
    contracts = deployment.get("contracts") or {}
    if not network:
        raise VerifierError(f"No network in deployment_info of {deployment_file}")

    print(f"\nNetwork: {network}")
    print(f"Contracts to verify: {len(contracts)}")

    results = {}
    for contract_name, contract_info in contracts.items():
        try:
            if not isinstance(contract_info, dict):
                raise TypeError(f"entry for {contract_name} must be a mapping")
            _restore_hex_addresses(contract_info)
            request = _deployment_request(network, contract_name, contract_info, deployment_file.parent)
            print(f"\nVerifying {contract_name} at {request.address}...")
            outcome = verifier.verify(request)
            result = {"status": outcome.status.value, "message": outcome.message}
            if outcome.explorer_url:
                result["explorer_url"] = outcome.explorer_url
        except (VerifierError, KeyError, TypeError, ValueError) as e:
            message = f"missing field {e}" if isinstance(e, KeyError) else str(e)
            print(f"✗ {contract_name}: {message}")
            result = {"status": "error", "message": message}

        results[contract_name] = result
        deployment.setdefault("verification", {})[contract_name] = result

    with open(deployment_file, "w") as f:
        yaml.dump(deployment, f, default_flow_style=False, sort_keys=False)

    print(f"\n✓ Updated deployment log: {deployment_file}")
    return results


def cmd_verify_deployment(verifier: ContractVerifier, args) -> int:
    deployment_file = Path(args.deployment)
    if not deployment_file.exists():
        print(f"✗ Deployment file not found: {deployment_file}")
        return 1

    results = verify_from_deployment(verifier, deployment_file)

    print("\n" + "=" * 60)
    print("VERIFICATION SUMMARY")
    print("=" * 60)

    for contract_name, result in results.items():
        status = result["status"]
        emoji = "✓" if status == OutcomeStatus.VERIFIED.value else "⚠" if status == OutcomeStatus.TIMED_OUT.value else "✗"
        print(f"{emoji} {contract_name}: {result['message']}")

    print("=" * 60)
    return 0 if all(r["status"] == OutcomeStatus.VERIFIED.value for r in results.values()) else 1


def cmd_networks(verifier: ContractVerifier, args) -> int:
    print("Supported Networks:\n")
    for network in verifier.supported_networks():
        info = verifier.network_info(network)
        key_state = "" if info.has_credential else f"  (set {info.key_env})"
        print(f"• {network.ljust(10)} - {info.name}{key_state}")
    print("\nMake sure to set the corresponding API keys in your .env file")
    return 0


def cmd_setup(verifier: ContractVerifier, args) -> int:
    print("Setup Instructions:\n")
    print("1. Create a .env file in your project root")
    print("2. Add your API keys:\n")
    for network in verifier.supported_networks():
        print(f"   {verifier.network_info(network).key_env}=your_api_key")
    print("\n3. Get API keys from:")
    for name, url in API_KEY_SITES:
        print(f"   • {name}: {url}")
    print("\n4. Run your first verification:")
    print(
        "   contract-verifier verify --network ethereum --address 0x... "
        "--source ./Contract.sol --contract MyContract --version v0.8.19+commit.e7d8d7db"
    )
    return 0


def cmd_status(verifier: ContractVerifier, args) -> int:
    print(f"Checking verification status for {args.address} on {args.network}...\n")
    status = verifier.verification_status(args.network, args.address)

    if not status.verified:
        print("✗ Contract is not verified")
        print(f"   {status.message}")
        return 1

    print("✓ Contract is verified!")
    print(f"Contract Name: {status.contract_name}")
    print(f"Compiler Version: {status.compiler_version}")
    print(f"Optimization: {'Enabled' if status.optimization_used else 'Disabled'}")
    if status.optimization_used:
        print(f"Runs: {status.runs}")
    return 0


def cmd_versions(verifier: ContractVerifier, args) -> int:
    print(f"Fetching compiler versions for {args.network}...\n")
    versions = verifier.compiler_versions(args.network)

    print("Available compiler versions:")
    for index, version in enumerate(versions[:MAX_VERSIONS_SHOWN], start=1):
        print(f"{index}. {version}")
    if len(versions) > MAX_VERSIONS_SHOWN:
        print(f"... and {len(versions) - MAX_VERSIONS_SHOWN} more versions")
    return 0


def cmd_encode_args(verifier: Optional[ContractVerifier], args) -> int:
    types = _split_csv(args.types)
    values = _split_csv(args.values)

    print("Encoding constructor arguments...\n")
    print(f"Types: {', '.join(types)}")
    print(f"Values: {', '.join(values)}\n")

    encoded = encode_constructor_args(types, values)
    print(f"✓ Encoded arguments: {encoded}")
    print("\nUse this value with the --args flag")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-verifier",
        description="Verify smart contracts on Etherscan-family block explorers",
    )
    parser.add_argument("--config", type=str, help="Path to a chains YAML file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    verify = subparsers.add_parser("verify", help="Verify a smart contract on a block explorer")
    verify.add_argument("-n", "--network", required=True, help="Network (ethereum, polygon, bsc, arbitrum, optimism, base)")
    verify.add_argument("-a", "--address", required=True, help="Contract address (0x...)")
    verify.add_argument("-s", "--source", required=True, help="Path to source file (.sol)")
    verify.add_argument("-c", "--contract", required=True, help="Contract name (must match the contract name in source)")
    verify.add_argument("-v", "--version", dest="compiler_version", required=True, help="Compiler version (e.g., v0.8.19+commit.e7d8d7db)")
    verify.add_argument("--args", dest="constructor_args", default="", help="Constructor arguments (hex encoded)")
    verify.add_argument("--optimized", action="store_true", help="Enable optimization")
    verify.add_argument("--runs", type=_positive_int, default=200, help="Optimization runs")
    verify.add_argument("--evm-version", default="default", help="EVM version (default, london, berlin, etc.)")
    verify.add_argument("--max-attempts", type=_positive_int, default=None, help="Status checks before giving up")
    verify.add_argument("--interval", type=_non_negative_float, default=None, help="Seconds between status checks")
    verify.set_defaults(handler=cmd_verify)

    deployment = subparsers.add_parser("verify-deployment", help="Verify all contracts from a deployment YAML file")
    deployment.add_argument("deployment", help="Path to deployment YAML file")
    deployment.set_defaults(handler=cmd_verify_deployment)

    networks = subparsers.add_parser("networks", help="List supported networks")
    networks.set_defaults(handler=cmd_networks)

    setup = subparsers.add_parser("setup", help="Show setup instructions")
    setup.set_defaults(handler=cmd_setup)

    status = subparsers.add_parser("status", help="Check verification status of a contract")
    status.add_argument("-n", "--network", required=True, help="Network name")
    status.add_argument("-a", "--address", required=True, help="Contract address")
    status.set_defaults(handler=cmd_status)

    versions = subparsers.add_parser("versions", help="Get available compiler versions")
    versions.add_argument("-n", "--network", default="ethereum", help="Network name")
    versions.set_defaults(handler=cmd_versions)

    encode = subparsers.add_parser("encode-args", help="Encode constructor arguments")
    encode.add_argument("-t", "--types", required=True, help="Argument types (comma-separated, e.g., uint256,address)")
    encode.add_argument("-V", "--values", required=True, help="Argument values (comma-separated)")
    encode.set_defaults(handler=cmd_encode_args)

    return parser


def main(argv=None) -> int:
    """Main verification function"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="  %(message)s")
    # urllib3 logs full request URLs, which carry the API key
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if not getattr(args, "handler", None):
        parser.print_help()
        return 1

    load_dotenv(Path.cwd() / ".env")

    try:
        if args.handler is cmd_encode_args:
            return cmd_encode_args(None, args)

        config = load_config(Path(args.config) if args.config else None)
        verifier = ContractVerifier(config)
        return args.handler(verifier, args)

    except KeyboardInterrupt:
        print("\n\n✗ Verification cancelled by user")
        return 1
    except VerifierError as e:
        print(f"\n✗ Error: {e}")
        _print_hint(e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
