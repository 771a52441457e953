"""
Operator-facing text for a finished deployment
"""

from sepolia_deployer.config import DeployerConfig
from sepolia_deployer.models import DeploymentResult, basis_points_to_percent


class OperatorReport:
    """Formats deployment results. No side effects."""

    def __init__(self, config: DeployerConfig):
        self.config = config

    def verification_command(self, result: DeploymentResult) -> str:
        return self.config.verify_command_template.format(
            network=result.network,
            address=result.contract_address,
            fee_rate=result.fee_rate_basis_points,
        )

    def explorer_link(self, result: DeploymentResult) -> str:
        return f"{self.config.explorer_url}/address/{result.contract_address}"

    def report(self, result: DeploymentResult) -> str:
        fee = result.fee_rate_basis_points
        lines = [
            "🎉 Contract deployed successfully!",
            "=" * 60,
            f"Contract address: {result.contract_address}",
            f"Deployer: {result.deployer_address}",
            f"Platform fee rate: {fee} basis points ({basis_points_to_percent(fee)}%)",
            f"Transaction hash: {result.transaction_hash}",
            f"Block number: {result.block_number}",
            f"Deployed at: {result.deployed_at}",
            "=" * 60,
            "",
            f"Deployment info saved to: {self.config.deployment_info_path}",
            "",
            "Verify the contract with:",
            self.verification_command(result),
            "",
            f"View on {result.network} explorer:",
            self.explorer_link(result),
        ]
        if not self.config.etherscan_api_key:
            lines.append("⚠️  ETHERSCAN_API_KEY is not set; verification will need it")
        return "\n".join(lines)
