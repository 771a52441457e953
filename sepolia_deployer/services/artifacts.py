"""
Compiled contract artifacts (Hardhat JSON) used as the deployment blueprint
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from sepolia_deployer.errors import ArtifactError


@dataclass(frozen=True)
class ContractArtifact:
    contract_name: str
    abi: List[Dict]
    bytecode: str

    @property
    def constructor_inputs(self) -> List[Dict]:
        return ctor_meta(self.abi)[0]


def ctor_meta(abi) -> Tuple[List[Dict], str]:
    ctor = next((i for i in abi if i.get("type") == "constructor"), None)
    if not ctor:
        return [], "nonpayable"
    return ctor.get("inputs", []), ctor.get("stateMutability", "nonpayable")


def has_unlinked_libs(bytecode: str) -> bool:
    return "__$" in (bytecode or "")


def load_artifact(path: Path, contract_name: str) -> ContractArtifact:
    """Read `contract_name` from a compiled artifact file.

    Two shapes are supported:
      A) single-contract artifact (Hardhat): {"contractName", "abi", "bytecode", ...}
      B) map of contracts: {Name: {"abi", "bytecode"}, ...}
    Any other shape raises ArtifactError.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ArtifactError(f"Artifact not found: {path} (compile {contract_name} first)")
    except (OSError, ValueError) as e:
        raise ArtifactError(f"Cannot read artifact {path}: {e}")

    try:
        return _parse_artifact(data, path, contract_name)
    except (TypeError, AttributeError) as e:
        raise ArtifactError(f"Malformed artifact {path}: {e}") from e


def _parse_artifact(data, path: Path, contract_name: str) -> ContractArtifact:
    if not isinstance(data, dict):
        raise ArtifactError(f"{path} is not a JSON object")

    if "abi" in data and "bytecode" in data:
        obj = data
        name = data.get("contractName") or contract_name
        if name != contract_name:
            raise ArtifactError(f"{path} contains {name}, expected {contract_name}")
    elif contract_name in data:
        obj = data[contract_name]
    else:
        raise ArtifactError(f"{contract_name} not found in {path}")
    if not isinstance(obj, dict):
        raise ArtifactError(f"{contract_name} entry in {path} is not a JSON object")

    abi = obj.get("abi")
    bytecode = obj.get("bytecode") or ""
    if isinstance(bytecode, dict):
        # solc standard-json output nests the hex under "object"
        bytecode = bytecode.get("object", "") or ""
    if not isinstance(abi, list) or not all(isinstance(item, dict) for item in abi):
        raise ArtifactError(f"{contract_name} artifact has no valid ABI")
    if not isinstance(bytecode, str):
        raise ArtifactError(f"{contract_name} bytecode is not a hex string")
    if not bytecode or bytecode == "0x":
        raise ArtifactError(f"{contract_name} artifact has no bytecode")
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    if has_unlinked_libs(bytecode):
        placeholders = set(re.findall(r"__\$\w{34}\$__", bytecode))
        raise ArtifactError(f"{contract_name} has unlinked libraries: {placeholders}")

    inputs, _ = ctor_meta(abi)
    if not isinstance(inputs, list) or len(inputs) != 1:
        count = len(inputs) if isinstance(inputs, list) else 0
        raise ArtifactError(
            f"{contract_name} constructor takes {count} argument(s), expected the fee rate only"
        )
    return ContractArtifact(contract_name=contract_name, abi=abi, bytecode=bytecode)
