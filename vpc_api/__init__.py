"""HTTP control plane for VPC network plans and deployments."""
