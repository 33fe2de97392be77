VISUAL_STYLE = {
    "Application": {
        "shape": "rounded_rect",
        "color": "#64B5F6",
    },
    "API": {
        "shape": "hexagon",
        "color": "#00ACC1",
    },
    "BusinessFunction": {
        "shape": "rounded_rect",
        "color": "#4CAF50",
    },
    # Legacy label used by older repository exports
    "BusinessCapability": {
        "shape": "rounded_rect",
        "color": "#4CAF50",
    },
    "Component": {
        "shape": "rect",
        "color": "#FF9800",
    },
    "DataObject": {
        "shape": "cylinder",
        "color": "#2196F3",
    },
    "Table": {
        "shape": "cylinder",
        "color": "#1565C0",
    },
    "Server": {
        "shape": "rect",
        "color": "#9C27B0",
    },
    "AppChange": {
        "shape": "parallelogram",
        "color": "#E91E63",
    },
    "InfraChange": {
        "shape": "parallelogram",
        "color": "#795548",
    },
}

DEFAULT_STYLE = {
    "shape": "rect",
    "color": "#BDBDBD",
}


def style_for(node_type: str) -> dict:
    return VISUAL_STYLE.get(node_type, DEFAULT_STYLE)
