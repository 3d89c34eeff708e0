"""
Support for writing scripts using transitcost.

The expected usage of core transitcost types is like:

    from transitcost import TransitPipeline

However, the scripting package is not part of the core
library, and contains extensions.

Therefore, the expected usage is as follows:

    from transitcost.scripting import tc_logging

That is, each module whose name starts with `tc_` in this
package is an independent extension module you may want
to optionally load for writing transitcost based scripts.
"""
