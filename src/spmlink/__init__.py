"""Swift Package Manager wiring for Xcode projects and CocoaPods Podfiles."""

__version__ = "0.3.0"
