"""figma2jsx: convert Figma JSON exports or UI screenshots into React + Tailwind JSX."""

__version__ = "0.1.0"
