"""
Diagram Engine
==============
The host-independent core behind every interactive diagram.

Why is this file needed?
------------------------
1. Activation: Containers are registered once and initialized lazily, at
   most once, when they first come near the viewport (registry, activation).
2. Rendering: A single generic pairing of layout engine, drag controller and
   particle animator turns a DiagramDescriptor into a live diagram (diagram).
3. Maintenance: Resizes are debounced and re-render only activated diagrams
   (resize).

Note: This package should be pure Python/NumPy/SciPy and should NOT import PySide6.
All waiting goes through the Scheduler protocol.
"""
