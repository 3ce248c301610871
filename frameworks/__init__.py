"""frameworks/ -- Host framework adapters for the documentation gateway.

base.py holds the framework-independent gateway and the adapter contract.
Every other module binds that contract to one host framework.
"""

from frameworks.base import BaseFramework
from frameworks.fastapi_framework import FastAPIFramework

__all__ = ["BaseFramework", "FastAPIFramework"]
