"""
Single-contract deployer for the Sepolia test network
"""

__version__ = '1.0.0'
