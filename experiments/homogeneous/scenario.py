"""
同构拓扑：所有主机、VM 与 Cloudlet 规格一致。
"""

from experiments.base import CloudletSpec, HostSpec, TopologyShape, VmSpec


SHAPE = TopologyShape(
    name="homogeneous",
    section="homogeneous",
    label="Homogeneous",
    hosts=[
        (4, HostSpec(pes=8, mips=2000, ram=1024 * 12, bw=8000, storage=1_000_000)),
    ],
    vms=[
        (8, VmSpec(pes=4, mips=1500, ram=4048, bw=500, size=100_000)),
    ],
    cloudlets=[
        (50, CloudletSpec(pes=2, length=10_000, file_size=100, output_size=50)),
    ],
    detailed_csv="Showcase_Homogeneous_Detailed.csv",
    metrics_csv="Showcase_Homogeneous_Metrics.csv",
)
