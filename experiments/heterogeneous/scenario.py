"""
异构拓扑：light / medium / strong 三档主机、VM 与 Cloudlet 混合。
"""

from experiments.base import CloudletSpec, HostSpec, TopologyShape, VmSpec


LIGHT_HOST = HostSpec(pes=4, mips=1000, ram=4096, bw=1000, storage=1_000_000)
MEDIUM_HOST = HostSpec(pes=8, mips=2500, ram=16384, bw=5000, storage=2_000_000)
STRONG_HOST = HostSpec(pes=16, mips=4000, ram=32768, bw=10_000, storage=2_000_000)

LIGHT_VM = VmSpec(pes=1, mips=500, ram=1024, bw=200, size=40_000)
MEDIUM_VM = VmSpec(pes=2, mips=1500, ram=2048, bw=300, size=60_000)
STRONG_VM = VmSpec(pes=4, mips=3000, ram=4096, bw=1000, size=100_000)

LIGHT_CLOUDLET = CloudletSpec(pes=1, length=1000, file_size=10, output_size=1)
MEDIUM_CLOUDLET = CloudletSpec(pes=2, length=10_000, file_size=100, output_size=50)
STRONG_CLOUDLET = CloudletSpec(pes=4, length=50_000, file_size=4000, output_size=100)


SHAPE = TopologyShape(
    name="heterogeneous",
    section="heterogeneous",
    label="Heterogeneous",
    hosts=[(4, LIGHT_HOST), (2, MEDIUM_HOST), (4, STRONG_HOST)],
    vms=[(3, LIGHT_VM), (4, MEDIUM_VM), (3, STRONG_VM)],
    cloudlets=[(15, LIGHT_CLOUDLET), (20, MEDIUM_CLOUDLET), (15, STRONG_CLOUDLET)],
    detailed_csv="Showcase_Heterogeneous_Detailed.csv",
    metrics_csv="Showcase_Heterogeneous_Metrics.csv",
)
