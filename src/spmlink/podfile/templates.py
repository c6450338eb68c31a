"""Generated Podfile content.

Blocks are written relative to the hook body (two-space indent); the
patcher shifts them to the indentation of the hook they land in.
"""

POST_INSTALL_HOOK = "post_install do |installer|"

POD_NAME = "react-native-fastvlm-ios"

MARKER = f"{POD_NAME} Pod to link against Swift Package Manager"

MLX_CONFIGURATION = f"""\
  # Configure {POD_NAME} Pod to link against Swift Package Manager dependencies
  installer.pods_project.targets.each do |target|
    if target.name == '{POD_NAME}'
      puts "Configuring Swift Package dependencies for {POD_NAME} Pod..."

      # Add build settings to enable Swift Package Manager dependencies
      target.build_configurations.each do |config|
        config.build_settings['SWIFT_INCLUDE_PATHS'] = ['$(inherited)', '$(SRCROOT)/../node_modules/{POD_NAME}/ios']
        config.build_settings['OTHER_SWIFT_FLAGS'] = ['$(inherited)', '-Xfrontend', '-enable-experimental-cross-module-incremental-build']
      end
    end
  end
"""
