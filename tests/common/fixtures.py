"""
Sample vCloud Director documents shared by the test suite.
"""

API_URL = "https://vcd.example.com/api"

TASK_ID = "2f1d9a7c-3b4e-4c5d-9e8f-0a1b2c3d4e5f"

TASK_LOCATION = f"{API_URL}/task/{TASK_ID}"

# Two networks: net1 isolated without a parent, net2 routed with port forwarding
NETWORK_CONFIG_SECTION = """<?xml version="1.0" encoding="UTF-8"?>
<NetworkConfigSection xmlns="http://www.vmware.com/vcloud/v1.5" xmlns:ovf="http://schemas.dmtf.org/ovf/envelope/1" href="https://vcd.example.com/api/vApp/vapp-1234/networkConfigSection/" type="application/vnd.vmware.vcloud.networkConfigSection+xml" ovf:required="false">
    <ovf:Info>The configuration parameters for logical networks</ovf:Info>
    <Link rel="edit" href="https://vcd.example.com/api/vApp/vapp-1234/networkConfigSection/" type="application/vnd.vmware.vcloud.networkConfigSection+xml"/>
    <NetworkConfig networkName="net1">
        <Description>Isolated network</Description>
        <Configuration>
            <IpScopes>
                <IpScope>
                    <IsInherited>false</IsInherited>
                    <Gateway>192.168.10.1</Gateway>
                    <Netmask>255.255.255.0</Netmask>
                    <IsEnabled>true</IsEnabled>
                </IpScope>
            </IpScopes>
            <FenceMode>isolated</FenceMode>
            <RetainNetInfoAcrossDeployments>false</RetainNetInfoAcrossDeployments>
        </Configuration>
        <IsDeployed>false</IsDeployed>
    </NetworkConfig>
    <NetworkConfig networkName="net2">
        <Description>Routed network</Description>
        <Configuration>
            <IpScopes>
                <IpScope>
                    <IsInherited>false</IsInherited>
                    <Gateway>192.168.20.1</Gateway>
                    <Netmask>255.255.255.0</Netmask>
                    <IsEnabled>true</IsEnabled>
                </IpScope>
            </IpScopes>
            <ParentNetwork name="old-ext" id="old-id" href="https://vcd.example.com/api/admin/network/old-id"/>
            <FenceMode>natRouted</FenceMode>
            <RetainNetInfoAcrossDeployments>false</RetainNetInfoAcrossDeployments>
            <Features>
                <NatService>
                    <IsEnabled>true</IsEnabled>
                    <NatType>portForwarding</NatType>
                    <Policy>allowTraffic</Policy>
                    <NatRule>
                        <Id>65537</Id>
                        <VmRule>
                            <ExternalIpAddress>203.0.113.10</ExternalIpAddress>
                            <ExternalPort>2222</ExternalPort>
                            <VAppScopedVmId>vm-a</VAppScopedVmId>
                            <VmNicId>0</VmNicId>
                            <InternalPort>22</InternalPort>
                            <Protocol>TCP</Protocol>
                        </VmRule>
                    </NatRule>
                    <NatRule>
                        <Id>65538</Id>
                        <VmRule>
                            <ExternalIpAddress>203.0.113.10</ExternalIpAddress>
                            <ExternalPort>5353</ExternalPort>
                            <VAppScopedVmId>vm-b</VAppScopedVmId>
                            <VmNicId>1</VmNicId>
                            <InternalPort>53</InternalPort>
                            <Protocol>UDP</Protocol>
                        </VmRule>
                    </NatRule>
                </NatService>
            </Features>
            <RouterInfo>
                <ExternalIp>203.0.113.10</ExternalIp>
            </RouterInfo>
        </Configuration>
        <IsDeployed>true</IsDeployed>
    </NetworkConfig>
</NetworkConfigSection>
"""

# A single routed network in port forwarding mode, two rules with ids 1 and 2
ROUTED_NETWORK_CONFIG_SECTION = """<?xml version="1.0" encoding="UTF-8"?>
<NetworkConfigSection xmlns="http://www.vmware.com/vcloud/v1.5" xmlns:ovf="http://schemas.dmtf.org/ovf/envelope/1">
    <ovf:Info>The configuration parameters for logical networks</ovf:Info>
    <NetworkConfig networkName="net1">
        <Configuration>
            <IpScopes>
                <IpScope>
                    <IsInherited>false</IsInherited>
                    <Gateway>192.168.1.1</Gateway>
                    <Netmask>255.255.255.0</Netmask>
                </IpScope>
            </IpScopes>
            <ParentNetwork name="ext" id="ext-id" href="https://vcd.example.com/api/admin/network/ext-id"/>
            <FenceMode>natRouted</FenceMode>
            <Features>
                <NatService>
                    <IsEnabled>true</IsEnabled>
                    <NatType>portForwarding</NatType>
                    <Policy>allowTraffic</Policy>
                    <NatRule>
                        <Id>1</Id>
                        <VmRule>
                            <ExternalIpAddress>198.51.100.7</ExternalIpAddress>
                            <ExternalPort>80</ExternalPort>
                            <VAppScopedVmId>web</VAppScopedVmId>
                            <VmNicId>0</VmNicId>
                            <InternalPort>8080</InternalPort>
                            <Protocol>TCP</Protocol>
                        </VmRule>
                    </NatRule>
                    <NatRule>
                        <Id>2</Id>
                        <VmRule>
                            <ExternalIpAddress>198.51.100.7</ExternalIpAddress>
                            <ExternalPort>443</ExternalPort>
                            <VAppScopedVmId>web</VAppScopedVmId>
                            <VmNicId>0</VmNicId>
                            <InternalPort>8443</InternalPort>
                            <Protocol>TCP_UDP</Protocol>
                        </VmRule>
                    </NatRule>
                </NatService>
            </Features>
            <RouterInfo>
                <ExternalIp>198.51.100.7</ExternalIp>
            </RouterInfo>
        </Configuration>
        <IsDeployed>true</IsDeployed>
    </NetworkConfig>
</NetworkConfigSection>
"""

# Routed network whose edge has no external IP yet and a rule without ExternalIpAddress
UNDEPLOYED_ROUTED_SECTION = """<?xml version="1.0" encoding="UTF-8"?>
<NetworkConfigSection xmlns="http://www.vmware.com/vcloud/v1.5">
    <NetworkConfig networkName="net1">
        <Configuration>
            <IpScopes/>
            <FenceMode>natRouted</FenceMode>
            <Features>
                <NatService>
                    <NatType>portForwarding</NatType>
                    <NatRule>
                        <Id>7</Id>
                        <VmRule>
                            <ExternalPort>22</ExternalPort>
                            <VAppScopedVmId>vm-x</VAppScopedVmId>
                            <VmNicId>0</VmNicId>
                            <InternalPort>22</InternalPort>
                            <Protocol>TCP</Protocol>
                        </VmRule>
                    </NatRule>
                </NatService>
            </Features>
        </Configuration>
    </NetworkConfig>
</NetworkConfigSection>
"""

# Routed network using IP translation instead of port forwarding
IP_TRANSLATION_SECTION = """<?xml version="1.0" encoding="UTF-8"?>
<NetworkConfigSection xmlns="http://www.vmware.com/vcloud/v1.5">
    <NetworkConfig networkName="net1">
        <Configuration>
            <FenceMode>natRouted</FenceMode>
            <Features>
                <NatService>
                    <IsEnabled>true</IsEnabled>
                    <NatType>ipTranslation</NatType>
                    <Policy>allowTraffic</Policy>
                </NatService>
            </Features>
            <RouterInfo>
                <ExternalIp>198.51.100.9</ExternalIp>
            </RouterInfo>
        </Configuration>
    </NetworkConfig>
</NetworkConfigSection>
"""

# Network without IpScopes or ParentNetwork
NO_IP_SCOPES_SECTION = """<?xml version="1.0" encoding="UTF-8"?>
<NetworkConfigSection xmlns="http://www.vmware.com/vcloud/v1.5">
    <NetworkConfig networkName="bare">
        <Configuration>
            <FenceMode>isolated</FenceMode>
        </Configuration>
        <IsInherited>false</IsInherited>
    </NetworkConfig>
</NetworkConfigSection>
"""

TASK_DOCUMENT = f"""<?xml version="1.0" encoding="UTF-8"?>
<Task xmlns="http://www.vmware.com/vcloud/v1.5" status="running" operationName="vappUpdateVm" href="{TASK_LOCATION}"/>
"""

VCD_ERROR_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<Error xmlns="http://www.vmware.com/vcloud/v1.5" majorErrorCode="400" minorErrorCode="BAD_REQUEST" message="The requested operation could not be executed since vApp is not running."/>
"""
