"""Podfile patching.

Inserts a generated configuration block into the Podfile's
``post_install`` hook, creating the hook when the Podfile has none.
The block carries a marker comment; a Podfile that already contains the
marker is left alone:

    post_install do |installer|
      ...existing code...
      # Configure react-native-fastvlm-ios Pod to link against Swift Package Manager dependencies
      ...generated code...
    end
"""

from spmlink.podfile.patcher import patch_podfile, patch_script

__all__ = ["patch_podfile", "patch_script"]
