"""DCF Flow - valuation state engine for a guided DCF setup flow

Modules:
  - dcf_flow.dcf: value types and pure valuation math
  - dcf_flow.flow: flow state, reducers, drift and change tracking, session
  - dcf_flow.engines: repository / forecast / sensitivity / DCF engine contracts
  - dcf_flow.data: ticker catalog and default revenue driver templates
  - dcf_flow.utils: configuration, logging and display formatting
  - dcf_flow.api: FastAPI server
"""

from . import utils, dcf, engines, data, flow

__version__ = "1.0.0"

__all__ = ["utils", "dcf", "engines", "data", "flow", "__version__"]
