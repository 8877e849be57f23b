"""HTTP surface for driving a scene."""
