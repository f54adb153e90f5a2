"""
The CONTROLLER layer wires the engine to the running application.

page.PageController is Qt-free and owns the registry, tracker and resize
coordinator; qt_scheduler.QtScheduler plugs the Qt event loop into the
engine's Scheduler protocol.
"""
