DEFAULT_TREE_NAME = "events"

# podio leaf names per record field; full branch name is "<collection>.<leaf>"
KINEMATICS_LEAVES = {
    "Q2": "Q2",
    "x": "x",
}

PARTICLE_LEAVES = {
    "energy": "energy",
    "px": "momentum.x",
    "py": "momentum.y",
    "pz": "momentum.z",
}
