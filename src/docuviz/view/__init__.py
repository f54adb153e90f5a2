"""
The VIEW layer contains the Qt widgets: the scrollable document, the diagram
containers and the QGraphicsView surface diagrams are drawn on.
"""
